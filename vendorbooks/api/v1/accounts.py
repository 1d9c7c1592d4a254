import logging
from uuid import UUID
from typing import List, Optional
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from vendorbooks.core.config import settings
from vendorbooks.db.session import get_db
from vendorbooks.db.snapshot import load_expenses, load_payments
from vendorbooks.api.deps import get_current_vendor_id
from vendorbooks.finance import (
    CategoryTotal,
    LedgerEntry,
    LedgerWindow,
    Page,
    PaymentType,
    build_ledger,
    expense_breakdown,
    paginate,
)
from vendorbooks.models.entity import Entity
from vendorbooks.models.expense import Expense as ExpenseRow
from vendorbooks.schemas.booking import PaymentOut
from vendorbooks.schemas.expense import ExpenseCreate, ExpenseOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _window(
    year: Optional[int],
    month: Optional[int],
    date_from: Optional[date],
    date_to: Optional[date],
) -> LedgerWindow:
    """
    Resolve the list/ledger filters into one window.

    - `year` + `month` selects a calendar month, `year` alone a whole year.
    - `date_from` / `date_to` narrow that period, or stand alone.
    - With no filter at all, the current month is used.
    """
    if month and not year:
        raise HTTPException(
            status_code=400, detail="Provide `year` alongside `month`."
        )
    if date_from and date_to and date_from > date_to:
        raise HTTPException(
            status_code=400, detail="`date_from` must not be after `date_to`."
        )
    if not (year or date_from or date_to):
        today = date.today()
        year, month = today.year, today.month
    return LedgerWindow(year=year, month=month, date_from=date_from, date_to=date_to)


# ---------------------------------------------------------------------------
# GET /accounts/income — received payments (refunds excluded)
# ---------------------------------------------------------------------------


@router.get("/income", response_model=Page[PaymentOut])
def list_income(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    date_from: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Income records for the window, newest first."""
    window = _window(year, month, date_from, date_to)
    payments = [
        p for p in reversed(load_payments(db, vendor_id))
        if p.payment_type != PaymentType.REFUND and window.contains(p.payment_date)
    ]
    return paginate([PaymentOut.model_validate(p) for p in payments], limit, page)


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


@router.get("/expenses", response_model=Page[ExpenseOut])
def list_expenses(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    date_from: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
    entity_id: Optional[UUID] = Query(None, description="Filter by entity (venue/branch)"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Expense records for the window, newest first."""
    window = _window(year, month, date_from, date_to)
    expenses = [
        e for e in reversed(load_expenses(db, vendor_id, [entity_id] if entity_id else None))
        if window.contains(e.date)
    ]
    return paginate([ExpenseOut.model_validate(e) for e in expenses], limit, page)


@router.post("/expenses", response_model=ExpenseOut, status_code=201)
def create_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    entity = db.query(Entity).filter(
        Entity.id == payload.entity_id,
        Entity.vendor_id == vendor_id,
    ).first()
    if not entity:
        raise HTTPException(status_code=404, detail="Entity not found")

    expense = ExpenseRow(vendor_id=vendor_id, **payload.model_dump())
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info(f"Added {expense.category} expense {expense.id} ({expense.amount}).")
    return ExpenseOut.model_validate(expense)


@router.get("/expenses/breakdown", response_model=List[CategoryTotal])
def get_expense_breakdown(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Expense totals per category for one month (current month by default)."""
    if month and not year:
        raise HTTPException(
            status_code=400, detail="Provide `year` alongside `month`."
        )
    today = date.today()
    return expense_breakdown(
        load_expenses(db, vendor_id),
        year or today.year,
        month or today.month,
    )


# ---------------------------------------------------------------------------
# GET /accounts/ledger — running balance for a window
# ---------------------------------------------------------------------------


@router.get("/ledger", response_model=Page[LedgerEntry])
def get_ledger(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    date_from: Optional[date] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="End date (YYYY-MM-DD)"),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    Chronological credits (payments received) and debits (expenses).

    The running balance starts at 0 at the first entry of the window, so
    changing the window changes every balance. Refunds are not listed.
    """
    window = _window(year, month, date_from, date_to)
    entries = build_ledger(load_payments(db, vendor_id), load_expenses(db, vendor_id), window)
    return paginate(entries, limit, page)
