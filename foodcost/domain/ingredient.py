"""Data models for ingredient costing."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Literal

from foodcost.domain.numbers import ZERO, coerce_conversion_factor, non_negative, to_decimal

FactorSource = Literal["auto", "manual"]

UNTITLED_INGREDIENT = "Untitled Ingredient"


def new_line_id() -> str:
    """Fresh opaque id for a ledger line or catalog item."""
    return uuid.uuid4().hex


def normalize_name(name: str | None) -> str:
    """Matching key for ingredient and catalog names."""
    return (name or "").strip().casefold()


@dataclass
class IngredientLine:
    """A single costed row of a recipe.

    ``conversion_factor`` is recipe units per purchase unit. It is kept in sync
    with the unit pair unless ``factor_source`` is ``"manual"``.
    """

    id: str
    name: str = ""
    quantity: Decimal = Decimal("1")
    unit: str = "g"
    purchase_price: Decimal = ZERO
    purchase_unit: str = "kg"
    conversion_factor: Decimal = Decimal("1000")
    factor_source: FactorSource = "auto"

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def unit_cost(self) -> Decimal:
        # Cost of one recipe unit
        if self.conversion_factor > 0:
            return self.purchase_price / self.conversion_factor
        return ZERO

    @property
    def extension_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    @property
    def is_costed(self) -> bool:
        """Whether this line counts toward the grand total."""
        return (
            bool(self.name)
            and self.quantity > 0
            and self.purchase_price > 0
            and self.conversion_factor > 0
        )

    @property
    def is_placeholder(self) -> bool:
        """Unused blank row that a catalog drop may overwrite."""
        return not self.name.strip() and self.purchase_price == 0

    def copy(self) -> IngredientLine:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": str(self.quantity),
            "unit": self.unit,
            "purchasePrice": str(self.purchase_price),
            "purchaseUnit": self.purchase_unit,
            "conversionFactor": str(self.conversion_factor),
            "factorSource": self.factor_source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IngredientLine:
        source = data.get("factorSource", "auto")
        return cls(
            id=str(data.get("id") or new_line_id()),
            name=str(data.get("name") or ""),
            quantity=non_negative(data.get("quantity")),
            unit=str(data.get("unit") or "g"),
            purchase_price=non_negative(data.get("purchasePrice")),
            purchase_unit=str(data.get("purchaseUnit") or "kg"),
            conversion_factor=coerce_conversion_factor(data.get("conversionFactor")),
            factor_source="manual" if source == "manual" else "auto",
        )


@dataclass(frozen=True)
class CatalogItem:
    """Reference purchase price for an ingredient (one market-list entry)."""

    id: str
    name: str
    price: Decimal
    unit: str

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "price": str(self.price), "unit": self.unit}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogItem:
        return cls(
            id=str(data.get("id") or new_line_id()),
            name=str(data.get("name") or ""),
            price=non_negative(data.get("price")),
            unit=str(data.get("unit") or "kg"),
        )


@dataclass(frozen=True)
class ParsedIngredient:
    """Untrusted ``{name, quantity, unit}`` triple from free-text extraction.

    Any field may be missing; defaults are applied when the triple is imported.
    """

    name: str | None
    quantity: Decimal | None = None
    unit: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> ParsedIngredient:
        raw_name = data.get("name")
        raw_unit = data.get("unit")
        raw_qty = data.get("quantity")
        return cls(
            name=str(raw_name) if raw_name is not None else None,
            quantity=to_decimal(raw_qty) if raw_qty is not None else None,
            unit=str(raw_unit) if raw_unit is not None else None,
        )
