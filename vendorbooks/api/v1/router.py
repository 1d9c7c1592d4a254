from fastapi import APIRouter

from vendorbooks.api.v1.bookings import router as bookings_router
from vendorbooks.api.v1.calendar import router as calendar_router
from vendorbooks.api.v1.dashboard import router as dashboard_router
from vendorbooks.api.v1.accounts import router as accounts_router
from vendorbooks.api.v1.reports import router as reports_router

api_router = APIRouter()

# --- Booking detail, payments, cancellation ---
api_router.include_router(bookings_router)

# --- Calendar & dashboard KPIs ---
api_router.include_router(calendar_router)
api_router.include_router(dashboard_router)

# --- Accounts: income, expenses, ledger ---
api_router.include_router(accounts_router)

# --- Reports: P&L ---
api_router.include_router(reports_router)
