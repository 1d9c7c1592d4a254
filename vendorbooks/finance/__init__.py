"""
Booking reconciliation and period reporting.

Every function here is pure: it reads its arguments, allocates fresh output
and performs no I/O. Callers take one consistent snapshot of bookings,
payments and expenses before calling any of them.
"""

from vendorbooks.finance.types import DerivedStatus, ExplicitStatus, PaymentType, Granularity
from vendorbooks.finance.money import to_amount
from vendorbooks.finance.records import (
    Booking, Payment, Expense,
    ReconciliationResult, LedgerEntry, PeriodBucket, CategoryTotal,
)
from vendorbooks.finance.status import derive_status, status_counts
from vendorbooks.finance.reconciliation import (
    reconcile, reconcile_all, suggest_payment_type, outstanding_total,
)
from vendorbooks.finance.ledger import LedgerWindow, build_ledger, iter_ledger
from vendorbooks.finance.periods import (
    aggregate, period_totals, trend_percent, expense_breakdown, available_years, month_label,
)
from vendorbooks.finance.pagination import Page, PageRequest, paginate
