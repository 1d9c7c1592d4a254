import uuid
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vendorbooks.core.security import create_access_token
from vendorbooks.db.base import Base, Booking, Entity, Expense, Payment
from vendorbooks.db.session import get_db
from vendorbooks.finance import month_label
from vendorbooks.main import app

VENDOR_ID = uuid.uuid4()


def _make_client():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app), TestingSessionLocal


def _auth(vendor_id=VENDOR_ID) -> dict:
    return {"Authorization": f"Bearer {create_access_token(str(vendor_id))}"}


def _seed(SessionLocal) -> dict:
    """One past booking with a partial payment, a refund and an expense in Jan 2025."""
    db = SessionLocal()
    try:
        entity = Entity(vendor_id=VENDOR_ID, name="Main Hall")
        db.add(entity)
        db.flush()
        booking = Booking(
            vendor_id=VENDOR_ID,
            entity_id=entity.id,
            client_name="Asha",
            event_name="Wedding",
            total_amount=Decimal("10000"),
            event_date=date(2025, 1, 10),
            from_time="10:00",
            to_time="18:00",
        )
        db.add(booking)
        db.flush()
        db.add_all([
            Payment(
                vendor_id=VENDOR_ID,
                booking_id=booking.id,
                amount=Decimal("4000"),
                payment_date=date(2025, 1, 5),
                payment_type="partial",
            ),
            Payment(
                vendor_id=VENDOR_ID,
                booking_id=booking.id,
                amount=Decimal("1000"),
                payment_date=date(2025, 1, 12),
                payment_type="refund",
            ),
            Expense(
                vendor_id=VENDOR_ID,
                entity_id=entity.id,
                date=date(2025, 1, 20),
                amount=Decimal("500"),
                category="Decor",
            ),
        ])
        db.commit()
        return {"entity_id": str(entity.id), "booking_id": str(booking.id)}
    finally:
        db.close()


def test_requires_bearer_token() -> None:
    client, _ = _make_client()
    assert client.get("/api/v1/bookings/").status_code == 401
    bad = client.get("/api/v1/bookings/", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401


def test_list_bookings_with_derived_status() -> None:
    client, SessionLocal = _make_client()
    _seed(SessionLocal)

    resp = client.get("/api/v1/bookings/", headers=_auth())
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["data"][0]["status"] == "completed"

    filtered = client.get("/api/v1/bookings/", params={"status": "confirmed"}, headers=_auth())
    assert filtered.json()["total"] == 0

    clamped = client.get("/api/v1/bookings/", params={"page": 9}, headers=_auth())
    assert clamped.json()["page"] == 1


def test_booking_detail_nets_refunds() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)

    resp = client.get(f"/api/v1/bookings/{ids['booking_id']}", headers=_auth())
    assert resp.status_code == 200
    body = resp.json()
    rec = body["reconciliation"]
    assert Decimal(rec["total_paid"]) == Decimal("4000")
    assert Decimal(rec["total_refunded"]) == Decimal("1000")
    assert Decimal(rec["net_paid"]) == Decimal("3000")
    assert Decimal(rec["pending"]) == Decimal("7000")
    assert Decimal(rec["progress_percent"]) == Decimal("30")
    assert len(body["payments"]) == 2


def test_other_vendors_booking_is_not_found() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)

    resp = client.get(f"/api/v1/bookings/{ids['booking_id']}", headers=_auth(uuid.uuid4()))
    assert resp.status_code == 404


def test_payment_type_suggestion_and_recording() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)
    url = f"/api/v1/bookings/{ids['booking_id']}"

    partial = client.get(f"{url}/payment-type", params={"amount": "100"}, headers=_auth())
    assert partial.json()["payment_type"] == "partial"
    advance = client.get(
        f"{url}/payment-type", params={"amount": "100", "advance": True}, headers=_auth()
    )
    assert advance.json()["payment_type"] == "advance"

    created = client.post(
        f"{url}/payments",
        json={"amount": "7000", "payment_date": "2025-01-15"},
        headers=_auth(),
    )
    assert created.status_code == 201
    assert created.json()["payment_type"] == "full"

    detail = client.get(url, headers=_auth()).json()
    assert Decimal(detail["reconciliation"]["pending"]) == 0
    assert Decimal(detail["reconciliation"]["progress_percent"]) == 100


def test_refund_amount_requires_refund_type() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)
    url = f"/api/v1/bookings/{ids['booking_id']}/payments"

    partial = client.post(
        url, json={"amount": "500", "payment_type": "partial", "refund_amount": "100"}, headers=_auth()
    )
    assert partial.status_code == 422
    untyped = client.post(url, json={"amount": "500", "refund_amount": "100"}, headers=_auth())
    assert untyped.status_code == 422

    refund = client.post(
        url,
        json={"amount": "500", "payment_type": "refund", "refund_amount": "300", "payment_date": "2025-01-16"},
        headers=_auth(),
    )
    assert refund.status_code == 201
    assert Decimal(refund.json()["refund_amount"]) == Decimal("300")

    detail = client.get(f"/api/v1/bookings/{ids['booking_id']}", headers=_auth()).json()
    assert Decimal(detail["reconciliation"]["total_refunded"]) == Decimal("1300")


def test_cancel_twice_conflicts() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)
    url = f"/api/v1/bookings/{ids['booking_id']}/cancel"

    first = client.patch(url, headers=_auth())
    assert first.status_code == 200
    assert first.json()["status"] == "cancelled"
    assert client.patch(url, headers=_auth()).status_code == 409

    detail = client.get(f"/api/v1/bookings/{ids['booking_id']}", headers=_auth())
    assert detail.json()["status"] == "cancelled"


def test_ledger_for_month() -> None:
    client, SessionLocal = _make_client()
    _seed(SessionLocal)

    resp = client.get(
        "/api/v1/accounts/ledger", params={"year": 2025, "month": 1}, headers=_auth()
    )
    assert resp.status_code == 200
    entries = resp.json()["data"]
    assert [e["particulars"] for e in entries] == ["Payment Received", "Decor"]
    assert [Decimal(e["running_balance"]) for e in entries] == [Decimal("4000"), Decimal("3500")]


def test_month_without_year_is_rejected() -> None:
    client, _ = _make_client()
    resp = client.get("/api/v1/accounts/ledger", params={"month": 3}, headers=_auth())
    assert resp.status_code == 400

    backwards = client.get(
        "/api/v1/accounts/expenses",
        params={"date_from": "2025-02-01", "date_to": "2025-01-01"},
        headers=_auth(),
    )
    assert backwards.status_code == 400


def test_income_excludes_refunds() -> None:
    client, SessionLocal = _make_client()
    _seed(SessionLocal)

    resp = client.get("/api/v1/accounts/income", params={"year": 2025}, headers=_auth())
    assert resp.status_code == 200
    assert [p["payment_type"] for p in resp.json()["data"]] == ["partial"]


def test_profit_and_loss_monthly() -> None:
    client, SessionLocal = _make_client()
    _seed(SessionLocal)

    resp = client.get("/api/v1/reports/pnl", params={"year": 2025}, headers=_auth())
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["buckets"]) == 12
    january = body["buckets"][0]
    assert january["period_label"] == "Jan 2025"
    assert Decimal(january["income"]) == Decimal("4000")
    assert Decimal(january["expenses"]) == Decimal("500")
    assert Decimal(body["total_profit"]) == Decimal("3500")

    other = client.get(
        "/api/v1/reports/pnl",
        params={"year": 2025, "entity_ids": [str(uuid.uuid4())]},
        headers=_auth(),
    )
    assert Decimal(other.json()["total_income"]) == 0

    years = client.get("/api/v1/reports/years", headers=_auth()).json()
    assert 2025 in years
    assert years == sorted(years, reverse=True)


def test_profit_and_loss_scoped_to_entity() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)

    db = SessionLocal()
    try:
        lawn = Entity(vendor_id=VENDOR_ID, name="Garden Lawn")
        db.add(lawn)
        db.flush()
        booking = Booking(
            vendor_id=VENDOR_ID,
            entity_id=lawn.id,
            event_name="Reception",
            total_amount=Decimal("2000"),
            event_date=date(2025, 1, 25),
        )
        db.add(booking)
        db.flush()
        db.add(Payment(
            vendor_id=VENDOR_ID,
            booking_id=booking.id,
            amount=Decimal("2000"),
            payment_date=date(2025, 1, 25),
            payment_type="full",
        ))
        db.commit()
        lawn_id = str(lawn.id)
    finally:
        db.close()

    hall = client.get(
        "/api/v1/reports/pnl",
        params={"year": 2025, "entity_ids": [ids["entity_id"]]},
        headers=_auth(),
    ).json()
    assert Decimal(hall["total_income"]) == Decimal("4000")
    assert Decimal(hall["total_expenses"]) == Decimal("500")

    garden = client.get(
        "/api/v1/reports/pnl",
        params={"year": 2025, "entity_ids": [lawn_id]},
        headers=_auth(),
    ).json()
    assert Decimal(garden["total_income"]) == Decimal("2000")
    assert Decimal(garden["total_expenses"]) == 0

    both = client.get(
        "/api/v1/reports/pnl",
        params={"year": 2025, "entity_ids": [ids["entity_id"], lawn_id]},
        headers=_auth(),
    ).json()
    assert Decimal(both["total_income"]) == Decimal("6000")


def test_dashboard_summary() -> None:
    client, SessionLocal = _make_client()
    _seed(SessionLocal)

    resp = client.get("/api/v1/dashboard/summary", headers=_auth())
    assert resp.status_code == 200
    body = resp.json()
    assert set(body["status_counts"]) == {"confirmed", "completed", "cancelled"}
    assert body["status_counts"]["completed"] == 1
    assert Decimal(body["pending_total"]) == Decimal("7000")
    assert set(body["trends"]) == {"revenue_trend", "expenses_trend", "profit_trend", "bookings_trend"}
    assert body["current"]["period_label"] == month_label(date.today())


def test_calendar_month() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)

    resp = client.get("/api/v1/calendar/", params={"year": 2025, "month": 1}, headers=_auth())
    assert resp.status_code == 200
    assert resp.json() == [
        {
            "date": "2025-01-10",
            "booking_id": ids["booking_id"],
            "event_name": "Wedding",
            "status": "completed",
        }
    ]
    empty = client.get("/api/v1/calendar/", params={"year": 2025, "month": 2}, headers=_auth())
    assert empty.json() == []


def test_create_expense() -> None:
    client, SessionLocal = _make_client()
    ids = _seed(SessionLocal)
    payload = {
        "date": "2025-01-22",
        "amount": "250",
        "category": "Travel",
        "entity_id": ids["entity_id"],
    }

    created = client.post("/api/v1/accounts/expenses", json=payload, headers=_auth())
    assert created.status_code == 201
    assert created.json()["category"] == "Travel"

    breakdown = client.get(
        "/api/v1/accounts/expenses/breakdown", params={"year": 2025, "month": 1}, headers=_auth()
    ).json()
    assert [row["category"] for row in breakdown] == ["Decor", "Travel"]

    unknown = dict(payload, entity_id=str(uuid.uuid4()))
    assert client.post("/api/v1/accounts/expenses", json=unknown, headers=_auth()).status_code == 404

    invalid = dict(payload, amount="0")
    assert client.post("/api/v1/accounts/expenses", json=invalid, headers=_auth()).status_code == 422
