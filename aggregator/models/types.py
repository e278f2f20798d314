"""Shared type definitions for pool models.

These types are used across upstream and canonical pool models.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from aggregator.math.fixed_point import to_decimal


def validate_pool_id(value: Any) -> str:
    """Coerce a pool identifier to its string form.

    The indexer encodes pool ids as JSON numbers, the node as strings.

    Raises:
        ValueError: If value is not a non-negative integer or integer string
    """
    if isinstance(value, bool):
        raise ValueError(f"Pool id must be an integer or string, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Pool id cannot be negative: {value}")
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Pool id must be an integer or string, got {type(value).__name__}")
    if not value:
        raise ValueError("Pool id cannot be empty")
    return value


def validate_integer_string(value: Any) -> str:
    """Validate that a value is a base-10 integer amount.

    Args:
        value: Value to validate (string or int)

    Returns:
        Amount as decimal integer string

    Raises:
        ValueError: If value is not an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Amount must be string or int, got {value!r}")
    if isinstance(value, int):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Amount must be string or int, got {type(value).__name__}")
    try:
        int(value)
    except ValueError as err:
        raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err
    return value


# Pool identifier, always serialized as a string
PoolId = Annotated[
    str,
    BeforeValidator(validate_pool_id),
    Field(description="Pool identifier as string"),
]

# Decimal numeral; floats are parsed from their shortest repr
DecimalAmount = Annotated[
    Decimal,
    BeforeValidator(to_decimal),
    Field(description="Finite decimal numeral"),
]

# Integer token amount in base units
IntegerString = Annotated[
    str,
    BeforeValidator(validate_integer_string),
    Field(description="Integer amount as decimal string"),
]
