"""Exact decimal conversions for on-chain amounts and fees.

Upstream sources report amounts as a floating mantissa plus a power-of-ten
exponent, and fees in hundredths. Both are converted with Decimal arithmetic
in a high-precision context so that no binary floating-point rounding leaks
into canonical amounts.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_DOWN, Decimal, InvalidOperation

from aggregator.errors import InvalidAmountError

# 78 digits of precision, enough for uint256 values (up to ~10^77)
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

DecimalLike = Decimal | int | float | str


def to_decimal(value: DecimalLike) -> Decimal:
    """Parse a numeral into a finite Decimal.

    Floats go through their shortest string repr, never through binary
    arithmetic, so 0.1 becomes Decimal("0.1").

    Raises:
        InvalidAmountError: If the value is not a finite decimal numeral
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not a decimal numeral: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as err:
            raise InvalidAmountError(f"Not a decimal numeral: {value!r}") from err
    else:
        raise InvalidAmountError(f"Not a decimal numeral: {value!r}")

    if not result.is_finite():
        raise InvalidAmountError(f"Not a finite decimal numeral: {value!r}")
    return result


def scale_by_power_of_ten(value: DecimalLike, exponent: int) -> Decimal:
    """Return value * 10**exponent computed exactly."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return to_decimal(value).scaleb(exponent)


def to_integer_string(mantissa: DecimalLike, exponent: int) -> str:
    """Convert a number with exponent decimals into a whole integer string.

    The fractional remainder is truncated toward zero, never rounded.

    Args:
        mantissa: Human-readable amount (e.g. 1.5 for 1.5 OSMO)
        exponent: Power of ten to apply (e.g. 6 for uosmo)

    Returns:
        Base-10 integer string, e.g. "1500000"

    Raises:
        InvalidAmountError: If mantissa is not a decimal numeral
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled = scale_by_power_of_ten(mantissa, exponent)
        return str(int(scaled.to_integral_value(rounding=ROUND_DOWN)))


def scale_decimal_string(value: DecimalLike, exponent: int) -> str:
    """Rescale a decimal and serialize it without exponent or trailing zeros.

    Example:
        scale_decimal_string(500, -2) -> "5"
        scale_decimal_string(30, -2) -> "0.3"
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled = scale_by_power_of_ten(value, exponent)
        if scaled.is_zero():
            return "0"
        return format(scaled.normalize(), "f")


__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "DecimalLike",
    "to_decimal",
    "scale_by_power_of_ten",
    "to_integer_string",
    "scale_decimal_string",
]
