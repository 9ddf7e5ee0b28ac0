"""Currency helpers.

The store currency has no minor unit, so every amount is a whole number and
every derived value is rounded half-up to the nearest unit.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any, Union

from pydantic import BeforeValidator

Number = Union[int, float, Decimal, str]

_UNIT = Decimal("1")


def to_decimal(value: Number) -> Decimal:
    """Convert without picking up binary float noise"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_currency(value: Number) -> int:
    """Round half-up to a whole currency unit"""
    return int(to_decimal(value).quantize(_UNIT, rounding=ROUND_HALF_UP))


def _coerce_amount(value: Any) -> Any:
    # Backends serialize decimals as strings like "99000.00"
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, (float, Decimal, str)):
        try:
            return round_currency(value)
        except (InvalidOperation, ValueError):
            return value
    return value


Amount = Annotated[int, BeforeValidator(_coerce_amount)]
