import os

# Point the app engine at SQLite before anything imports the settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import date
from decimal import Decimal

import pytest

from vendorbooks.finance import Booking, Expense, Payment


def make_booking(**kwargs) -> Booking:
    data = dict(id=uuid.uuid4(), event_name="Wedding", total_amount=Decimal("10000"))
    data.update(kwargs)
    return Booking(**data)


def make_payment(amount, payment_type="full", payment_date=date(2026, 3, 5), **kwargs) -> Payment:
    data = dict(
        id=uuid.uuid4(),
        booking_id=kwargs.pop("booking_id", uuid.uuid4()),
        amount=amount,
        payment_type=payment_type,
        payment_date=payment_date,
    )
    data.update(kwargs)
    return Payment(**data)


def make_expense(amount, expense_date=date(2026, 3, 10), category="Travel", **kwargs) -> Expense:
    data = dict(id=uuid.uuid4(), date=expense_date, amount=amount, category=category)
    data.update(kwargs)
    return Expense(**data)


@pytest.fixture
def booking_factory():
    return make_booking


@pytest.fixture
def payment_factory():
    return make_payment


@pytest.fixture
def expense_factory():
    return make_expense
