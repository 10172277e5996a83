"""Typed edit operations for ledger lines.

Each edit carries a validated payload. ``edit_from_field`` is the only place
that understands loose ``(field, value)`` pairs, for the CLI and HTTP
boundaries.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from foodcost.domain.numbers import coerce_conversion_factor, non_negative


class UnknownFieldError(ValueError):
    """Raised for an edit field name that is not part of an ingredient line."""


@dataclass(frozen=True)
class SetName:
    name: str


@dataclass(frozen=True)
class SetQuantity:
    quantity: Decimal


@dataclass(frozen=True)
class SetUnit:
    unit: str


@dataclass(frozen=True)
class SetPurchasePrice:
    price: Decimal


@dataclass(frozen=True)
class SetPurchaseUnit:
    unit: str


@dataclass(frozen=True)
class SetConversionFactorOverride:
    """Manual conversion factor; stays until the name or a unit changes."""

    factor: Decimal


IngredientEdit = SetName | SetQuantity | SetUnit | SetPurchasePrice | SetPurchaseUnit | SetConversionFactorOverride

_FIELD_ALIASES = {
    "name": "name",
    "quantity": "quantity",
    "qty": "quantity",
    "unit": "unit",
    "purchaseprice": "purchase_price",
    "purchase_price": "purchase_price",
    "purchaseunit": "purchase_unit",
    "purchase_unit": "purchase_unit",
    "conversionfactor": "conversion_factor",
    "conversion_factor": "conversion_factor",
}


def edit_from_field(field: str, value: Any) -> IngredientEdit:
    """Build a typed edit from a field name and an untyped value.

    Numeric values are coerced (non-numeric -> 0, negatives clamped to 0).
    """
    key = _FIELD_ALIASES.get(field.strip().lower())
    if key == "name":
        return SetName("" if value is None else str(value))
    if key == "quantity":
        return SetQuantity(non_negative(value))
    if key == "unit":
        return SetUnit("" if value is None else str(value))
    if key == "purchase_price":
        return SetPurchasePrice(non_negative(value))
    if key == "purchase_unit":
        return SetPurchaseUnit("" if value is None else str(value))
    if key == "conversion_factor":
        return SetConversionFactorOverride(coerce_conversion_factor(value))
    raise UnknownFieldError(f"Unknown ingredient field: {field!r}")
