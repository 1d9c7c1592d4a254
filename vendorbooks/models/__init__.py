from vendorbooks.models.entity import Entity
from vendorbooks.models.booking import Booking
from vendorbooks.models.payment import Payment
from vendorbooks.models.expense import Expense
