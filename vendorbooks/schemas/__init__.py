from vendorbooks.schemas.booking import (
    PaymentCreate, PaymentOut, PaymentTypeSuggestion,
    BookingSummary, BookingDetail, BookingCancelResponse,
)
from vendorbooks.schemas.expense import ExpenseCreate, ExpenseOut
from vendorbooks.schemas.report import KpiTrends, DashboardSummary, CalendarDay, PnLResponse
