"""
Filtered reads of a vendor's records, converted to finance input records.

Every amount passes through the record validators on the way out, so the
finance functions only ever see non-negative finite Decimals.
"""

from datetime import date
from typing import Collection, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from vendorbooks.finance import Booking, Expense, Payment
from vendorbooks.models.booking import Booking as BookingRow
from vendorbooks.models.expense import Expense as ExpenseRow
from vendorbooks.models.payment import Payment as PaymentRow


def load_bookings(
    db: Session,
    vendor_id: UUID,
    entity_ids: Optional[Collection[UUID]] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[Booking]:
    query = db.query(BookingRow).filter(BookingRow.vendor_id == vendor_id)
    if entity_ids:
        query = query.filter(BookingRow.entity_id.in_(list(entity_ids)))
    if date_from:
        query = query.filter(BookingRow.event_date >= date_from)
    if date_to:
        query = query.filter(BookingRow.event_date <= date_to)
    rows = query.order_by(BookingRow.event_date.asc(), BookingRow.created_at.asc()).all()
    return [Booking.model_validate(r) for r in rows]


def load_payments(
    db: Session,
    vendor_id: UUID,
    booking_ids: Optional[Collection[UUID]] = None,
) -> List[Payment]:
    """Payments in insertion-stable date order, each carrying its booking's entity."""
    query = (
        db.query(PaymentRow)
        .options(joinedload(PaymentRow.booking))
        .filter(PaymentRow.vendor_id == vendor_id)
    )
    if booking_ids is not None:
        query = query.filter(PaymentRow.booking_id.in_(list(booking_ids)))
    rows = query.order_by(PaymentRow.payment_date.asc(), PaymentRow.created_at.asc()).all()
    return [Payment.model_validate(r) for r in rows]


def load_expenses(
    db: Session,
    vendor_id: UUID,
    entity_ids: Optional[Collection[UUID]] = None,
) -> List[Expense]:
    query = db.query(ExpenseRow).filter(ExpenseRow.vendor_id == vendor_id)
    if entity_ids:
        query = query.filter(ExpenseRow.entity_id.in_(list(entity_ids)))
    rows = query.order_by(ExpenseRow.date.asc(), ExpenseRow.created_at.asc()).all()
    return [Expense.model_validate(r) for r in rows]


def get_booking_row(db: Session, vendor_id: UUID, booking_id: UUID) -> Optional[BookingRow]:
    """A single booking owned by the vendor, or None."""
    return (
        db.query(BookingRow)
        .filter(BookingRow.id == booking_id, BookingRow.vendor_id == vendor_id)
        .first()
    )
