"""Tests for exact decimal amount and fee conversions."""

from decimal import Decimal

import pytest

from aggregator.errors import InvalidAmountError
from aggregator.math import (
    scale_by_power_of_ten,
    scale_decimal_string,
    to_decimal,
    to_integer_string,
)


class TestToDecimal:
    """Tests for numeral parsing."""

    def test_float_uses_shortest_repr(self):
        """0.1 parses as Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(42) == Decimal(42)
        assert to_decimal(" 1.25 ") == Decimal("1.25")

    def test_decimal_passthrough(self):
        value = Decimal("3.14")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", float("inf"), True, None])
    def test_rejects_non_numerals(self, value):
        """Non-numerals and non-finite values raise InvalidAmountError."""
        with pytest.raises(InvalidAmountError):
            to_decimal(value)

    def test_invalid_amount_error_is_value_error(self):
        """Pydantic validators can surface the error as a validation error."""
        with pytest.raises(ValueError):
            to_decimal("not a number")


class TestToIntegerString:
    """Tests for mantissa/exponent to base-unit integer string."""

    def test_simple_scaling(self):
        """1.5 with 6 decimals is 1500000."""
        assert to_integer_string(1.5, 6) == "1500000"

    def test_truncates_fraction(self):
        """Fractional remainders are dropped, never rounded up."""
        assert to_integer_string("1.9999999", 6) == "1999999"
        assert to_integer_string(0.0000009, 6) == "0"

    def test_zero_exponent(self):
        assert to_integer_string("42", 0) == "42"

    def test_float_artifacts_do_not_leak(self):
        """0.1 * 10^18 is exactly 10^17."""
        assert to_integer_string(0.1, 18) == "100000000000000000"

    def test_large_values_keep_precision(self):
        """Amounts beyond float precision stay exact."""
        assert to_integer_string("123456789012345678901234567890.123456", 18) == (
            "123456789012345678901234567890123456000000000000"
        )

    def test_no_exponent_notation(self):
        """Results are plain integer strings."""
        assert to_integer_string("1e3", 6) == "1000000000"

    def test_invalid_mantissa_raises(self):
        with pytest.raises(InvalidAmountError):
            to_integer_string("abc", 6)


class TestScaleDecimalString:
    """Tests for fee rescaling."""

    @pytest.mark.parametrize(
        ("value", "exponent", "expected"),
        [
            (500, -2, "5"),
            (30, -2, "0.3"),
            (0.2, -2, "0.002"),
            ("0.05", -2, "0.0005"),
            (0, -2, "0"),
            ("0.000", -2, "0"),
            (Decimal("1.50"), 0, "1.5"),
        ],
    )
    def test_scaling(self, value, exponent, expected):
        assert scale_decimal_string(value, exponent) == expected

    def test_no_exponent_notation_for_small_values(self):
        """Tiny fees render positionally, never as 1E-8."""
        assert scale_decimal_string("0.000001", -2) == "0.00000001"


class TestScaleByPowerOfTen:
    """Tests for exact power-of-ten scaling."""

    def test_positive_and_negative(self):
        assert scale_by_power_of_ten("1.5", 2) == Decimal("150")
        assert scale_by_power_of_ten("150", -2) == Decimal("1.5")
