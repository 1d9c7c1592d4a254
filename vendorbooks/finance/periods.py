"""
Income/expense aggregation for trend cards, the P&L table and report charts.

Refund payments are never income here and are not subtracted either; netting
refunds only happens in per-booking reconciliation.
"""

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Collection, Iterable, List, Optional, Union

from vendorbooks.finance.money import ZERO, percent
from vendorbooks.finance.records import CategoryTotal, Expense, Payment, PeriodBucket
from vendorbooks.finance.types import Granularity, PaymentType

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_label(day: date) -> str:
    """Label such as ``Mar 2026``, independent of the process locale."""
    return f"{MONTH_ABBR[day.month - 1]} {day.year}"


def _bucket(label: str, income: Decimal, expenses: Decimal) -> PeriodBucket:
    profit = income - expenses
    return PeriodBucket(
        period_label=label,
        income=income,
        expenses=expenses,
        profit=profit,
        margin_percent=percent(profit, income) if income > 0 else ZERO,
    )


def _income_payments(payments: Iterable[Payment], entity_filter) -> List[Payment]:
    return [
        p for p in payments
        if p.payment_type != PaymentType.REFUND
        and (not entity_filter or p.entity_id in entity_filter)
    ]


def _scoped_expenses(expenses: Iterable[Expense], entity_filter) -> List[Expense]:
    return [e for e in expenses if not entity_filter or e.entity_id in entity_filter]


def aggregate(
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    granularity: Union[Granularity, str],
    year: int,
    entity_filter: Optional[Collection] = None,
) -> List[PeriodBucket]:
    """
    Bucket income and expenses by calendar month of ``year`` or by year.

    Monthly output always has twelve buckets, Jan to Dec, including months
    with no activity. Yearly output has one bucket per year present in the
    data (``year`` is ignored), oldest first.

    ``entity_filter`` restricts expenses by their entity and payments by the
    entity of their booking. An empty filter means all entities.
    """
    granularity = Granularity(granularity)
    income_payments = _income_payments(payments, entity_filter)
    scoped_expenses = _scoped_expenses(expenses, entity_filter)

    if granularity == Granularity.MONTHLY:
        income = [ZERO] * 12
        spent = [ZERO] * 12
        for p in income_payments:
            if p.payment_date.year == year:
                income[p.payment_date.month - 1] += p.amount
        for e in scoped_expenses:
            if e.date.year == year:
                spent[e.date.month - 1] += e.amount
        return [
            _bucket(f"{MONTH_ABBR[i]} {year}", income[i], spent[i])
            for i in range(12)
        ]

    totals = {}
    for p in income_payments:
        row = totals.setdefault(p.payment_date.year, [ZERO, ZERO])
        row[0] += p.amount
    for e in scoped_expenses:
        row = totals.setdefault(e.date.year, [ZERO, ZERO])
        row[1] += e.amount
    return [_bucket(str(y), *totals[y]) for y in sorted(totals)]


def period_totals(
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    date_from: date,
    date_to: date,
    label: str = "",
) -> PeriodBucket:
    """Income, expenses, profit and margin for an inclusive date range."""
    income = sum(
        (p.amount for p in payments
         if p.payment_type != PaymentType.REFUND and date_from <= p.payment_date <= date_to),
        ZERO,
    )
    spent = sum(
        (e.amount for e in expenses if date_from <= e.date <= date_to),
        ZERO,
    )
    return _bucket(label or f"{date_from.isoformat()}..{date_to.isoformat()}", income, spent)


def trend_percent(current: Decimal, previous: Decimal, signed: bool = False) -> Decimal:
    """
    Period-over-period change in percent, 0 when there is nothing to compare.

    Revenue-style trends only compare against a positive previous value.
    ``signed`` trends (profit) accept a negative previous value and divide by
    its magnitude so a recovery from a loss reads as growth.
    """
    if signed:
        if previous == 0:
            return ZERO
        return percent(current - previous, abs(previous))
    if previous <= 0:
        return ZERO
    return percent(current - previous, previous)


def expense_breakdown(expenses: Iterable[Expense], year: int, month: int) -> List[CategoryTotal]:
    """Expense totals per category for one month, largest first."""
    totals = OrderedDict()
    for e in expenses:
        if e.date.year == year and e.date.month == month:
            amount, count = totals.get(e.category, (ZERO, 0))
            totals[e.category] = (amount + e.amount, count + 1)
    rows = [CategoryTotal(category=c, amount=a, count=n) for c, (a, n) in totals.items()]
    return sorted(rows, key=lambda r: r.amount, reverse=True)


def available_years(
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> List[int]:
    """Years with any payment or expense, plus the current year, newest first."""
    today = today or date.today()
    years = {p.payment_date.year for p in payments if p.payment_type != PaymentType.REFUND}
    years.update(e.date.year for e in expenses)
    years.add(today.year)
    return sorted(years, reverse=True)
