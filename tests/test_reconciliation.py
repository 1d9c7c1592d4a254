import itertools
import uuid
from decimal import Decimal

import pytest

from vendorbooks.finance import (
    PaymentType,
    outstanding_total,
    reconcile,
    reconcile_all,
    suggest_payment_type,
)

D = Decimal


def test_partial_payment(payment_factory):
    result = reconcile(D("10000"), [payment_factory(4000, "partial")])
    assert result.net_paid == 4000
    assert result.pending == 6000
    assert result.progress_percent == 40


def test_refund_reduces_net_paid(payment_factory):
    result = reconcile(D("10000"), [payment_factory(10000, "full"), payment_factory(2000, "refund")])
    assert result.total_paid == 10000
    assert result.total_refunded == 2000
    assert result.net_paid == 8000
    assert result.pending == 2000
    assert result.progress_percent == 80


def test_refund_amount_overrides_amount(payment_factory):
    refund = payment_factory(5000, "refund", refund_amount=1500)
    result = reconcile(D("10000"), [payment_factory(6000, "advance"), refund])
    assert result.total_refunded == 1500
    assert result.net_paid == 4500


def test_zero_refund_amount_is_respected(payment_factory):
    refund = payment_factory(5000, "refund", refund_amount=0)
    result = reconcile(D("10000"), [payment_factory(6000, "partial"), refund])
    assert result.total_refunded == 0
    assert result.net_paid == 6000


def test_over_refund_floors_net_paid(payment_factory):
    result = reconcile(D("10000"), [payment_factory(1000, "partial"), payment_factory(3000, "refund")])
    assert result.net_paid == 0
    assert result.pending == 10000
    assert result.progress_percent == 0


def test_overpayment_caps_progress(payment_factory):
    result = reconcile(D("10000"), [payment_factory(12000, "overpaid")])
    assert result.net_paid == 12000
    assert result.pending == 0
    assert result.progress_percent == 100


def test_total_lowered_after_payment(payment_factory):
    result = reconcile(D("3000"), [payment_factory(5000, "full")])
    assert result.pending == 0
    assert result.progress_percent == 100


def test_zero_total(payment_factory):
    result = reconcile(D("0"), [payment_factory(500, "advance")])
    assert result.pending == 0
    assert result.progress_percent == 0


def test_no_payments():
    result = reconcile(D("2500"), [])
    assert result.net_paid == 0
    assert result.pending == 2500
    assert result.progress_percent == 0


def test_progress_is_rounded(payment_factory):
    result = reconcile(D("3000"), [payment_factory(1000, "partial")])
    assert result.progress_percent == D("33.33")


def test_is_deterministic(payment_factory):
    payments = [payment_factory(700, "partial"), payment_factory(100, "refund")]
    assert reconcile(D("1000"), payments) == reconcile(D("1000"), payments)


AMOUNTS = [0, 1, 999, 5000, 10000, 25000]
TOTALS = [0, 1, 5000, 10000]


@pytest.mark.parametrize("total", TOTALS)
@pytest.mark.parametrize("paid, refunded", list(itertools.product(AMOUNTS, AMOUNTS)))
def test_bounds_hold_for_any_payment_mix(payment_factory, total, paid, refunded):
    payments = [payment_factory(paid, "partial"), payment_factory(refunded, "refund")]
    result = reconcile(D(total), payments)
    assert result.net_paid >= 0
    assert 0 <= result.pending <= total
    assert 0 <= result.progress_percent <= 100


@pytest.mark.parametrize(
    "amount, pending, advance, expected",
    [
        ("5000", "5000", False, PaymentType.FULL),
        ("5000.004", "5000", False, PaymentType.FULL),
        ("4000", "5000", False, PaymentType.PARTIAL),
        ("6000", "5000", False, PaymentType.OVERPAID),
        ("100", "0", False, PaymentType.OVERPAID),
        ("5000", "5000", True, PaymentType.ADVANCE),
    ],
)
def test_suggest_payment_type(amount, pending, advance, expected):
    assert suggest_payment_type(D(amount), D(pending), advance) == expected


def test_outstanding_total_skips_cancelled(booking_factory, payment_factory):
    a = booking_factory(total_amount=10000)
    b = booking_factory(total_amount=4000)
    c = booking_factory(total_amount=9000, status="cancelled")
    payments = [
        payment_factory(4000, "partial", booking_id=a.id),
        payment_factory(4000, "full", booking_id=b.id),
        payment_factory(1000, "refund", booking_id=b.id),
        payment_factory(9000, "full", booking_id=uuid.uuid4()),
    ]
    assert outstanding_total([a, b, c], payments) == 7000


def test_reconcile_all_keeps_booking_order(booking_factory, payment_factory):
    a = booking_factory(total_amount=100)
    b = booking_factory(total_amount=200)
    results = reconcile_all([b, a], [payment_factory(50, "partial", booking_id=a.id)])
    assert [r.total_amount for r in results] == [200, 100]
    assert results[1].pending == 50


def test_plain_numeric_total_is_accepted(payment_factory):
    result = reconcile(10000.0, [payment_factory(4000, "partial")])
    assert result.pending == D("6000")
    assert result.progress_percent == D("40.00")

    assert reconcile(7500, []).pending == D("7500")


def test_negative_total_counts_as_zero(payment_factory):
    result = reconcile(D("-500"), [payment_factory(100, "partial")])
    assert result.total_amount == 0
    assert result.pending == 0
    assert result.progress_percent == 0


def test_huge_overpayment_keeps_progress_bounded(payment_factory):
    result = reconcile(D("0.01"), [payment_factory(D("1e27"), "overpaid")])
    assert result.pending == 0
    assert result.progress_percent == D("100.00")
