"""Exact decimal helpers for amount and fee normalization."""

from aggregator.math.fixed_point import (
    DECIMAL_HIGH_PREC_CONTEXT,
    scale_by_power_of_ten,
    scale_decimal_string,
    to_decimal,
    to_integer_string,
)

__all__ = [
    "DECIMAL_HIGH_PREC_CONTEXT",
    "to_decimal",
    "scale_by_power_of_ten",
    "to_integer_string",
    "scale_decimal_string",
]
