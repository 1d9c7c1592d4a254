from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from vendorbooks.finance.money import to_amount
from vendorbooks.finance.types import ExplicitStatus, PaymentType


def parse_date(value) -> Optional[date]:
    """Lenient date parsing: date/datetime/ISO string, anything else is None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


# ---------------------------------------------------------------------------
# Input records: one snapshot of the vendor's data, read-only
# ---------------------------------------------------------------------------


class Booking(BaseModel):
    id: UUID
    vendor_id: Optional[UUID] = None
    entity_id: Optional[UUID] = None
    event_name: str = ""
    client_name: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    event_date: Optional[date] = None
    from_time: Optional[str] = None   # "HH:MM", local time
    to_time: Optional[str] = None     # "HH:MM", local time
    status: ExplicitStatus = ExplicitStatus.ACTIVE

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("total_amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_amount(v)

    @field_validator("event_date", mode="before")
    @classmethod
    def coerce_event_date(cls, v):
        return parse_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v):
        # Legacy rows may still carry "confirmed"/"completed"; only a
        # cancellation is an explicit flag.
        if isinstance(v, ExplicitStatus):
            return v
        if str(v).lower() == ExplicitStatus.CANCELLED.value:
            return ExplicitStatus.CANCELLED
        return ExplicitStatus.ACTIVE

    @field_validator("from_time", "to_time", mode="before")
    @classmethod
    def time_to_text(cls, v):
        if isinstance(v, time):
            return v.strftime("%H:%M")
        if v == "":
            return None
        return v


class Payment(BaseModel):
    id: UUID
    booking_id: UUID
    amount: Decimal = Decimal("0")
    payment_date: date
    payment_type: PaymentType = PaymentType.FULL
    refund_amount: Optional[Decimal] = None  # refunds only, overrides amount when set
    payment_method: str = "cash"
    entity_id: Optional[UUID] = None        # entity of the owning booking

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_amount(v)

    @field_validator("refund_amount", mode="before")
    @classmethod
    def coerce_refund_amount(cls, v):
        if v is None:
            return None
        return to_amount(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def coerce_payment_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v

    @property
    def is_refund(self) -> bool:
        return self.payment_type == PaymentType.REFUND

    @property
    def refund_value(self) -> Decimal:
        """Magnitude a refund contributes when netting: refund_amount ?? amount."""
        return self.refund_amount if self.refund_amount is not None else self.amount


class Expense(BaseModel):
    id: UUID
    date: date
    amount: Decimal = Decimal("0")
    category: str
    description: Optional[str] = None
    payment_mode: str = "cash"
    entity_id: Optional[UUID] = None

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_amount(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v


# ---------------------------------------------------------------------------
# Derived records: rebuilt on every read, never persisted
# ---------------------------------------------------------------------------


class ReconciliationResult(BaseModel):
    total_amount: Decimal
    total_paid: Decimal
    total_refunded: Decimal
    net_paid: Decimal
    pending: Decimal
    progress_percent: Decimal

    class Config:
        frozen = True


class LedgerEntry(BaseModel):
    date: date
    particulars: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal

    class Config:
        frozen = True


class PeriodBucket(BaseModel):
    period_label: str    # "Mar 2026" | "2026"
    income: Decimal
    expenses: Decimal
    profit: Decimal
    margin_percent: Decimal

    class Config:
        frozen = True


class CategoryTotal(BaseModel):
    category: str
    amount: Decimal
    count: int

    class Config:
        frozen = True
