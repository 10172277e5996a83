"""Numeric coercion rules shared by the costing engine.

Every numeric field that crosses a user or storage boundary goes through
these helpers. Coercion is silent and deterministic: bad input never raises,
it becomes a fixed default.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

# "1,250" and "-12,000.5"; a comma anywhere else is not a grouping separator
_GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Parse ``value`` as a Decimal, returning ``default`` for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the short repr (0.1 -> "0.1") instead of the binary expansion
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if _GROUPED_NUMBER.match(text):
            text = text.replace(",", "")
        if not text:
            return default
        try:
            result = Decimal(text)
        except InvalidOperation:
            return default
    else:
        return default

    if not result.is_finite():
        return default
    return result


def non_negative(value: Any) -> Decimal:
    """Parse and clamp to zero."""
    number = to_decimal(value)
    return number if number > 0 else ZERO


def coerce_yield(value: Any) -> Decimal:
    """Servings count; anything non-positive becomes 1."""
    number = to_decimal(value)
    return number if number > 0 else ONE


def coerce_conversion_factor(value: Any) -> Decimal:
    """Recipe units per purchase unit; anything non-positive becomes 0 (not costed)."""
    number = to_decimal(value)
    return number if number > 0 else ZERO


def format_plain(value: Decimal) -> str:
    """Render a Decimal without exponent or trailing zeros (``1000``, ``0.08``)."""
    if value == value.to_integral_value():
        return str(value.quantize(ONE))
    return format(value.normalize(), "f")


def quantize_money(value: Decimal) -> Decimal:
    """Round a currency amount to cents, half up."""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value
