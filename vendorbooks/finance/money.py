"""
Numeric helpers shared by the reconciliation and reporting code.

Amounts are ``Decimal`` everywhere. Raw values coming out of the data store
(or a client payload) pass through ``to_amount`` before they reach the
finance functions, so sums never see ``None``, ``NaN`` or a negative number.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_amount(value) -> Decimal:
    """
    Coerce a raw monetary value to a non-negative finite Decimal.

    None, empty strings, unparseable text, NaN, infinities and negative
    numbers all become 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def percent(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100 rounded to two places; 0 when whole is 0."""
    if whole == 0:
        return ZERO.quantize(CENT)
    ratio = part / whole * HUNDRED
    with localcontext() as ctx:
        # room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, ratio.adjusted() + 3)
        return ratio.quantize(CENT, rounding=ROUND_HALF_UP)


def clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))
