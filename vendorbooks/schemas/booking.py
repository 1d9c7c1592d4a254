from typing import Optional, List
from pydantic import BaseModel, Field, UUID4, field_validator, model_validator
from decimal import Decimal
from datetime import date, datetime

from vendorbooks.finance import DerivedStatus, PaymentType, ReconciliationResult


# Payment — Create (POST /bookings/{id}/payments)
class PaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    payment_date: Optional[date] = None          # defaults to today
    payment_type: Optional[PaymentType] = None   # suggested from the pending amount when omitted
    refund_amount: Optional[Decimal] = Field(default=None, ge=0)
    payment_method: str = "cash"
    advance: bool = False
    notes: Optional[str] = None

    @field_validator("payment_type", mode="before")
    @classmethod
    def parse_empty_str_to_none(cls, v):
        if v == "":
            return None
        return v

    @model_validator(mode="after")
    def refund_amount_only_on_refunds(self):
        if self.refund_amount is not None and self.payment_type != PaymentType.REFUND:
            raise ValueError("refund_amount is only accepted for refund payments")
        return self


# Payment — response
class PaymentOut(BaseModel):
    id: UUID4
    booking_id: UUID4
    amount: Decimal
    payment_date: date
    payment_type: PaymentType
    refund_amount: Optional[Decimal] = None
    payment_method: str

    class Config:
        from_attributes = True


class PaymentTypeSuggestion(BaseModel):
    amount: Decimal
    pending: Decimal
    payment_type: PaymentType


# Booking — list item (GET /bookings)
class BookingSummary(BaseModel):
    id: UUID4
    event_name: str
    client_name: Optional[str] = None
    entity_id: Optional[UUID4] = None
    event_date: Optional[date] = None
    from_time: Optional[str] = None
    to_time: Optional[str] = None
    total_amount: Decimal
    status: DerivedStatus
    reconciliation: ReconciliationResult


# Booking — detail (GET /bookings/{id})
class BookingDetail(BookingSummary):
    notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    payments: List[PaymentOut] = []


# Booking — Cancel response (PATCH /bookings/{id}/cancel)
class BookingCancelResponse(BaseModel):
    id: UUID4
    status: DerivedStatus
    cancelled_at: datetime
