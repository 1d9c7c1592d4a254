from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, List, NamedTuple, Optional

from pydantic import BaseModel, model_validator

from vendorbooks.finance.money import ZERO
from vendorbooks.finance.records import Expense, LedgerEntry, Payment
from vendorbooks.finance.types import PaymentType

PAYMENT_PARTICULARS = "Payment Received"


class LedgerWindow(BaseModel):
    """
    Inclusive date window for the ledger.

    A calendar month (year + month) and an explicit from/to range may be
    combined; the range then narrows the month.
    """
    year: Optional[int] = None
    month: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_month(self):
        if self.month is not None and self.year is None:
            raise ValueError("month requires year")
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError("month must be between 1 and 12")
        return self

    @classmethod
    def for_month(cls, year: int, month: int) -> "LedgerWindow":
        return cls(year=year, month=month)

    @property
    def start(self) -> Optional[date]:
        bounds = [d for d in (self._period_start(), self.date_from) if d is not None]
        return max(bounds) if bounds else None

    @property
    def end(self) -> Optional[date]:
        bounds = [d for d in (self._period_end(), self.date_to) if d is not None]
        return min(bounds) if bounds else None

    def _period_start(self) -> Optional[date]:
        if self.year is None:
            return None
        return date(self.year, self.month or 1, 1)

    def _period_end(self) -> Optional[date]:
        if self.year is None:
            return None
        if self.month is None:
            return date(self.year, 12, 31)
        return date(self.year, self.month, monthrange(self.year, self.month)[1])

    def contains(self, day: date) -> bool:
        start, end = self.start, self.end
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True


class _Row(NamedTuple):
    date: date
    particulars: str
    debit: Decimal
    credit: Decimal


def _rows(payments: Iterable[Payment], expenses: Iterable[Expense]) -> List[_Row]:
    # Refunds stay out of the ledger; they only affect per-booking reconciliation.
    rows = [
        _Row(p.payment_date, PAYMENT_PARTICULARS, ZERO, p.amount)
        for p in payments
        if p.payment_type != PaymentType.REFUND
    ]
    rows.extend(
        _Row(e.date, e.description or e.category, e.amount, ZERO)
        for e in expenses
    )
    # sorted() is stable: same-day rows keep payments-then-expenses input order
    return sorted(rows, key=lambda r: r.date)


def iter_ledger(
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    window: Optional[LedgerWindow] = None,
) -> Iterator[LedgerEntry]:
    """
    Yield ledger entries in date order with a running balance.

    The window is applied before the balance is accumulated, so the balance
    always starts from 0 at the first entry inside the window.
    """
    balance = ZERO
    for row in _rows(payments, expenses):
        if window is not None and not window.contains(row.date):
            continue
        balance = balance + row.credit - row.debit
        yield LedgerEntry(
            date=row.date,
            particulars=row.particulars,
            debit=row.debit,
            credit=row.credit,
            running_balance=balance,
        )


def build_ledger(
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    window: Optional[LedgerWindow] = None,
) -> List[LedgerEntry]:
    return list(iter_ledger(payments, expenses, window))
