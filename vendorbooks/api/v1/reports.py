from uuid import UUID
from typing import List, Optional
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from vendorbooks.db.session import get_db
from vendorbooks.db.snapshot import load_expenses, load_payments
from vendorbooks.api.deps import get_current_vendor_id
from vendorbooks.finance import Granularity, aggregate, available_years
from vendorbooks.finance.money import ZERO
from vendorbooks.schemas.report import PnLResponse

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/pnl", response_model=PnLResponse)
def get_profit_and_loss(
    granularity: Granularity = Query(Granularity.MONTHLY, description="monthly | yearly"),
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Year for monthly buckets"),
    entity_ids: Optional[List[UUID]] = Query(None, description="Restrict to these entities"),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    Profit and loss per period.

    **monthly** always returns Jan to Dec of `year` (current year by default),
    zero-filled. **yearly** returns one bucket per year with activity.
    Refunds are not counted as income.
    """
    year = year or date.today().year
    buckets = aggregate(
        load_payments(db, vendor_id),
        load_expenses(db, vendor_id),
        granularity,
        year,
        set(entity_ids) if entity_ids else None,
    )
    total_income = sum((b.income for b in buckets), ZERO)
    total_expenses = sum((b.expenses for b in buckets), ZERO)

    return PnLResponse(
        granularity=granularity,
        year=year,
        buckets=buckets,
        total_income=total_income,
        total_expenses=total_expenses,
        total_profit=total_income - total_expenses,
    )


@router.get("/years", response_model=List[int])
def get_available_years(
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """Years with any income or expense, plus the current year, newest first."""
    return available_years(load_payments(db, vendor_id), load_expenses(db, vendor_id))
