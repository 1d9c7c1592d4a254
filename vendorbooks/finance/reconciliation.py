from collections import defaultdict
from decimal import Decimal
from typing import Iterable, List

from vendorbooks.finance.money import CENT, ZERO, clamp, percent, to_amount
from vendorbooks.finance.records import Booking, Payment, ReconciliationResult
from vendorbooks.finance.types import ExplicitStatus, PaymentType


def reconcile(total_amount: Decimal, payments: Iterable[Payment]) -> ReconciliationResult:
    """
    Net a booking's payments against its refunds.

    net_paid is floored at 0 and pending stays within [0, total_amount],
    also when the total was edited after payments were recorded.
    """
    total_amount = to_amount(total_amount)
    total_paid = ZERO
    total_refunded = ZERO
    for p in payments:
        if p.is_refund:
            total_refunded += p.refund_value
        else:
            total_paid += p.amount

    net_paid = max(ZERO, total_paid - total_refunded)
    pending = max(ZERO, min(total_amount, total_amount - net_paid))
    if total_amount > 0:
        progress = percent(clamp(net_paid, ZERO, total_amount), total_amount)
    else:
        progress = ZERO

    return ReconciliationResult(
        total_amount=total_amount,
        total_paid=total_paid,
        total_refunded=total_refunded,
        net_paid=net_paid,
        pending=pending,
        progress_percent=progress,
    )


def suggest_payment_type(amount: Decimal, pending: Decimal, advance: bool = False) -> PaymentType:
    """Pick the type for a new payment from how it compares to what is still owed."""
    if advance:
        return PaymentType.ADVANCE
    if abs(amount - pending) < CENT:
        return PaymentType.FULL
    if amount < pending:
        return PaymentType.PARTIAL
    return PaymentType.OVERPAID


def group_by_booking(payments: Iterable[Payment]) -> dict:
    grouped = defaultdict(list)
    for p in payments:
        grouped[p.booking_id].append(p)
    return grouped


def reconcile_all(
    bookings: Iterable[Booking], payments: Iterable[Payment]
) -> List[ReconciliationResult]:
    """Reconcile every booking against its own payments, in booking order."""
    grouped = group_by_booking(payments)
    return [reconcile(b.total_amount, grouped.get(b.id, [])) for b in bookings]


def outstanding_total(bookings: Iterable[Booking], payments: Iterable[Payment]) -> Decimal:
    """Money still owed across all bookings that are not cancelled."""
    active = [b for b in bookings if b.status != ExplicitStatus.CANCELLED]
    return sum((r.pending for r in reconcile_all(active, payments)), ZERO)
