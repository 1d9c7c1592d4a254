from uuid import UUID
from datetime import date, datetime, timedelta
from decimal import Decimal
from calendar import monthrange

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vendorbooks.db.session import get_db
from vendorbooks.db.snapshot import load_bookings, load_expenses, load_payments
from vendorbooks.api.deps import get_current_vendor_id
from vendorbooks.finance import month_label, outstanding_total, period_totals, status_counts, trend_percent
from vendorbooks.schemas.report import DashboardSummary, KpiTrends

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _month_bounds(day: date):
    return date(day.year, day.month, 1), date(day.year, day.month, monthrange(day.year, day.month)[1])


@router.get("/summary", response_model=DashboardSummary)
def get_summary(
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    KPI cards: this month's income, expenses and profit, their change against
    the previous month, money still owed across all active bookings and the
    number of bookings per derived status.
    """
    now = datetime.now()
    month_start, month_end = _month_bounds(now.date())
    prev_start, prev_end = _month_bounds(month_start - timedelta(days=1))

    bookings = load_bookings(db, vendor_id)
    payments = load_payments(db, vendor_id)
    expenses = load_expenses(db, vendor_id)

    current = period_totals(payments, expenses, month_start, month_end, month_label(month_start))
    previous = period_totals(payments, expenses, prev_start, prev_end, month_label(prev_start))

    def events_between(start: date, end: date) -> int:
        return sum(1 for b in bookings if b.event_date and start <= b.event_date <= end)

    bookings_now = events_between(month_start, month_end)
    bookings_prev = events_between(prev_start, prev_end)

    return DashboardSummary(
        month=month_start.strftime("%Y-%m"),
        current=current,
        previous=previous,
        bookings_this_month=bookings_now,
        trends=KpiTrends(
            revenue_trend=trend_percent(current.income, previous.income),
            expenses_trend=trend_percent(current.expenses, previous.expenses),
            profit_trend=trend_percent(current.profit, previous.profit, signed=True),
            bookings_trend=trend_percent(Decimal(bookings_now), Decimal(bookings_prev)),
        ),
        pending_total=outstanding_total(bookings, payments),
        status_counts=status_counts(bookings, now),
    )
