import logging
from uuid import UUID
from typing import Optional
from decimal import Decimal
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from vendorbooks.core.config import settings
from vendorbooks.db.session import get_db
from vendorbooks.db.snapshot import get_booking_row, load_bookings, load_payments
from vendorbooks.api.deps import get_current_vendor_id
from vendorbooks.finance import (
    Booking,
    DerivedStatus,
    ExplicitStatus,
    Page,
    derive_status,
    paginate,
    reconcile,
    suggest_payment_type,
)
from vendorbooks.finance.reconciliation import group_by_booking
from vendorbooks.models.booking import Booking as BookingRow
from vendorbooks.models.payment import Payment as PaymentRow
from vendorbooks.schemas.booking import (
    BookingCancelResponse,
    BookingDetail,
    BookingSummary,
    PaymentCreate,
    PaymentOut,
    PaymentTypeSuggestion,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _summarize(booking: Booking, payments, now: datetime) -> dict:
    """Fields shared by list items and the detail view."""
    return dict(
        id=booking.id,
        event_name=booking.event_name,
        client_name=booking.client_name,
        entity_id=booking.entity_id,
        event_date=booking.event_date,
        from_time=booking.from_time,
        to_time=booking.to_time,
        total_amount=booking.total_amount,
        status=derive_status(booking, now),
        reconciliation=reconcile(booking.total_amount, payments),
    )


def _load_owned(db: Session, vendor_id: UUID, booking_id: UUID) -> BookingRow:
    row = get_booking_row(db, vendor_id, booking_id)
    if not row:
        raise HTTPException(status_code=404, detail="Booking not found")
    return row


def _booking_payments(db: Session, vendor_id: UUID, booking_id: UUID):
    return load_payments(db, vendor_id, booking_ids=[booking_id])


# ---------------------------------------------------------------------------
# GET /bookings — list with derived status and balances
# ---------------------------------------------------------------------------


@router.get("/", response_model=Page[BookingSummary])
def list_bookings(
    # --- Filters ---
    entity_id: Optional[UUID] = Query(None, description="Filter by entity (venue/branch)"),
    date_from: Optional[date] = Query(None, description="Event date from (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Event date to (YYYY-MM-DD)"),
    status: Optional[DerivedStatus] = Query(None, description="confirmed | completed | cancelled"),
    # --- Pagination ---
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    Return the vendor's bookings ordered by event date.

    Status is derived on every request from the cancellation flag, the event
    date/end time and the current time, so filtering by `status` also happens
    after derivation. Out-of-range pages are clamped.
    """
    entity_ids = [entity_id] if entity_id else None
    bookings = load_bookings(db, vendor_id, entity_ids, date_from, date_to)
    payments = group_by_booking(
        load_payments(db, vendor_id, booking_ids=[b.id for b in bookings])
    )

    now = datetime.now()
    items = [
        BookingSummary(**_summarize(b, payments.get(b.id, []), now))
        for b in bookings
    ]
    if status:
        items = [i for i in items if i.status == status]

    return paginate(items, limit, page)


# ---------------------------------------------------------------------------
# GET /bookings/{id} — single booking detail
# ---------------------------------------------------------------------------


@router.get("/{booking_id}", response_model=BookingDetail)
def get_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Booking with its derived status, payment reconciliation and payment history."""
    row = _load_owned(db, vendor_id, booking_id)
    booking = Booking.model_validate(row)
    payments = _booking_payments(db, vendor_id, booking_id)

    return BookingDetail(
        **_summarize(booking, payments, datetime.now()),
        notes=row.notes,
        cancelled_at=row.cancelled_at,
        created_at=row.created_at,
        payments=[PaymentOut.model_validate(p) for p in payments],
    )


# ---------------------------------------------------------------------------
# GET /bookings/{id}/payment-type — suggest a type for a new payment
# ---------------------------------------------------------------------------


@router.get("/{booking_id}/payment-type", response_model=PaymentTypeSuggestion)
def get_payment_type(
    booking_id: UUID,
    amount: Decimal = Query(..., gt=0),
    advance: bool = Query(False, description="Mark the payment as an advance"),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    row = _load_owned(db, vendor_id, booking_id)
    booking = Booking.model_validate(row)
    result = reconcile(booking.total_amount, _booking_payments(db, vendor_id, booking_id))
    return PaymentTypeSuggestion(
        amount=amount,
        pending=result.pending,
        payment_type=suggest_payment_type(amount, result.pending, advance),
    )


# ---------------------------------------------------------------------------
# POST /bookings/{id}/payments — record a payment or refund
# ---------------------------------------------------------------------------


@router.post("/{booking_id}/payments", response_model=PaymentOut, status_code=201)
def record_payment(
    booking_id: UUID,
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    Record a payment against a booking.

    When `payment_type` is omitted it is suggested from the amount still
    pending: advance when flagged, otherwise full, partial or overpaid.
    """
    row = _load_owned(db, vendor_id, booking_id)
    payment_type = payload.payment_type
    if payment_type is None:
        booking = Booking.model_validate(row)
        pending = reconcile(
            booking.total_amount, _booking_payments(db, vendor_id, booking_id)
        ).pending
        payment_type = suggest_payment_type(payload.amount, pending, payload.advance)

    payment = PaymentRow(
        vendor_id=vendor_id,
        booking_id=row.id,
        amount=payload.amount,
        payment_date=payload.payment_date or date.today(),
        payment_type=payment_type.value,
        refund_amount=payload.refund_amount,
        payment_method=payload.payment_method,
        notes=payload.notes,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"Recorded {payment.payment_type} payment {payment.id} for booking {row.id}.")

    return PaymentOut.model_validate(payment)


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/cancel
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/cancel", response_model=BookingCancelResponse)
def cancel_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Set the explicit cancellation flag; it overrides every time-based status."""
    row = _load_owned(db, vendor_id, booking_id)
    if row.status == ExplicitStatus.CANCELLED.value:
        raise HTTPException(status_code=409, detail="Booking is already cancelled")

    row.status = ExplicitStatus.CANCELLED.value
    row.cancelled_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info(f"Cancelled booking {row.id}.")

    return BookingCancelResponse(
        id=row.id,
        status=derive_status(Booking.model_validate(row)),
        cancelled_at=row.cancelled_at,
    )
