from decimal import Decimal

import pytest

from vendorbooks.finance import to_amount
from vendorbooks.finance.money import percent


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, Decimal("0")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        (float("nan"), Decimal("0")),
        ("NaN", Decimal("0")),
        (float("inf"), Decimal("0")),
        (-5, Decimal("0")),
        ("-0.01", Decimal("0")),
        (True, Decimal("0")),
        (12, Decimal("12")),
        (12.5, Decimal("12.5")),
        (" 1500.75 ", Decimal("1500.75")),
        (Decimal("99.99"), Decimal("99.99")),
    ],
)
def test_to_amount(raw, expected):
    assert to_amount(raw) == expected


def test_percent_guards_zero():
    assert percent(Decimal("5"), Decimal("0")) == 0


def test_percent_rounds_half_up():
    assert percent(Decimal("1"), Decimal("8")) == Decimal("12.50")
    assert percent(Decimal("2"), Decimal("3")) == Decimal("66.67")


def test_nan_amount_is_coerced_on_records(payment_factory):
    assert payment_factory(float("nan")).amount == 0
    assert payment_factory(-300).amount == 0


def test_percent_of_very_large_ratio():
    assert percent(Decimal("1e27"), Decimal("0.01")) == Decimal("1e31")
    assert percent(Decimal("-1e27"), Decimal("0.01")) == Decimal("-1e31")
