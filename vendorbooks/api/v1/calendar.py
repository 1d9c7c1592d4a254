from uuid import UUID
from typing import List, Optional
from datetime import date, datetime
from calendar import monthrange

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from vendorbooks.db.session import get_db
from vendorbooks.db.snapshot import load_bookings
from vendorbooks.api.deps import get_current_vendor_id
from vendorbooks.finance import derive_status
from vendorbooks.schemas.report import CalendarDay

router = APIRouter(prefix="/calendar", tags=["Calendar"])


@router.get("/", response_model=List[CalendarDay])
def get_calendar(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    entity_id: Optional[UUID] = Query(None, description="Filter by entity (venue/branch)"),
    db: Session = Depends(get_db),
    vendor_id: UUID = Depends(get_current_vendor_id),
):
    """
    Booked dates of one month with each booking's derived status.

    Defaults to the current month. Callers re-fetch on a timer to pick up
    bookings whose end time has passed since the last request.
    """
    today = date.today()
    year = year or today.year
    month = month or today.month
    last_day = monthrange(year, month)[1]

    bookings = load_bookings(
        db,
        vendor_id,
        [entity_id] if entity_id else None,
        date(year, month, 1),
        date(year, month, last_day),
    )
    now = datetime.now()
    return [
        CalendarDay(
            date=b.event_date,
            booking_id=b.id,
            event_name=b.event_name,
            status=derive_status(b, now),
        )
        for b in bookings
        if b.event_date is not None
    ]
