from typing import Dict, List
from pydantic import BaseModel, UUID4
from decimal import Decimal
from datetime import date

from vendorbooks.finance import DerivedStatus, Granularity, PeriodBucket


class KpiTrends(BaseModel):
    revenue_trend: Decimal
    expenses_trend: Decimal
    profit_trend: Decimal
    bookings_trend: Decimal


class DashboardSummary(BaseModel):
    month: str                  # "2026-03"
    current: PeriodBucket
    previous: PeriodBucket
    bookings_this_month: int
    trends: KpiTrends
    pending_total: Decimal
    status_counts: Dict[DerivedStatus, int]


class CalendarDay(BaseModel):
    date: date
    booking_id: UUID4
    event_name: str
    status: DerivedStatus


class PnLResponse(BaseModel):
    granularity: Granularity
    year: int
    buckets: List[PeriodBucket]
    total_income: Decimal
    total_expenses: Decimal
    total_profit: Decimal
