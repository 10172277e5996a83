"""The ordered collection of ingredient lines for the recipe being costed."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace
from decimal import Decimal

from foodcost.domain.catalog import PriceCatalog
from foodcost.domain.edits import (
    IngredientEdit,
    SetConversionFactorOverride,
    SetName,
    SetPurchasePrice,
    SetPurchaseUnit,
    SetQuantity,
    SetUnit,
)
from foodcost.domain.ingredient import CatalogItem, IngredientLine, new_line_id
from foodcost.domain.numbers import ZERO, coerce_conversion_factor, non_negative
from foodcost.domain.units import is_piece_unit, resolve_conversion_factor


class LineNotFoundError(KeyError):
    """Raised when a ledger line id does not exist."""


def blank_line() -> IngredientLine:
    """New empty row: 1 g of an unnamed ingredient bought per kg."""
    return IngredientLine(
        id=new_line_id(),
        name="",
        quantity=Decimal("1"),
        unit="g",
        purchase_price=ZERO,
        purchase_unit="kg",
        conversion_factor=resolve_conversion_factor("kg", "g"),
    )


def line_from_catalog_item(item: CatalogItem) -> IngredientLine:
    """Row seeded from a catalog entry, used in grams or pieces."""
    recipe_unit = "pc" if is_piece_unit(item.unit) else "g"
    return IngredientLine(
        id=new_line_id(),
        name=item.name,
        quantity=Decimal("1"),
        unit=recipe_unit,
        purchase_price=item.price,
        purchase_unit=item.unit,
        conversion_factor=resolve_conversion_factor(item.unit, recipe_unit),
    )


def apply_edit(line: IngredientLine, edit: IngredientEdit, catalog: PriceCatalog | None = None) -> IngredientLine:
    """Return a new line with ``edit`` applied; ``line`` is not modified.

    Name and unit edits recompute the conversion factor from the unit pair.
    A direct factor edit becomes a manual override.
    """
    if isinstance(edit, SetName):
        updated = replace(line, name=edit.name)
        match = catalog.find_by_name(edit.name) if catalog is not None else None
        if match is not None:
            updated = replace(
                updated,
                purchase_price=match.price,
                purchase_unit=match.unit,
                conversion_factor=resolve_conversion_factor(match.unit, updated.unit),
                factor_source="auto",
            )
        return updated

    if isinstance(edit, SetUnit):
        return replace(
            line,
            unit=edit.unit,
            conversion_factor=resolve_conversion_factor(line.purchase_unit, edit.unit),
            factor_source="auto",
        )

    if isinstance(edit, SetPurchaseUnit):
        return replace(
            line,
            purchase_unit=edit.unit,
            conversion_factor=resolve_conversion_factor(edit.unit, line.unit),
            factor_source="auto",
        )

    if isinstance(edit, SetConversionFactorOverride):
        return replace(
            line,
            conversion_factor=coerce_conversion_factor(edit.factor),
            factor_source="manual",
        )

    if isinstance(edit, SetQuantity):
        return replace(line, quantity=non_negative(edit.quantity))

    if isinstance(edit, SetPurchasePrice):
        return replace(line, purchase_price=non_negative(edit.price))

    raise TypeError(f"Unsupported ingredient edit: {edit!r}")


class IngredientLedger:
    """Owns the recipe's ingredient lines and their display order.

    The catalog reference is read-only; it is consulted when a line is
    renamed so the purchase price can be seeded from the market list.
    """

    def __init__(self, lines: Iterable[IngredientLine] = (), catalog: PriceCatalog | None = None) -> None:
        self._lines: list[IngredientLine] = [line.copy() for line in lines]
        self.catalog = catalog

    def __iter__(self) -> Iterator[IngredientLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> tuple[IngredientLine, ...]:
        """Copies of the current lines, in display order."""
        return tuple(line.copy() for line in self._lines)

    def get(self, line_id: str) -> IngredientLine:
        return self._lines[self._index_of(line_id)].copy()

    def _index_of(self, line_id: str) -> int:
        for i, line in enumerate(self._lines):
            if line.id == line_id:
                return i
        raise LineNotFoundError(line_id)

    # --- Mutations ---

    def add_blank(self) -> IngredientLine:
        line = blank_line()
        self._lines.append(line)
        return line.copy()

    def add_from_catalog_item(self, item: CatalogItem) -> IngredientLine:
        """Add a catalog item, reusing the first placeholder row if there is one."""
        line = line_from_catalog_item(item)
        for i, existing in enumerate(self._lines):
            if existing.is_placeholder:
                self._lines[i] = line
                break
        else:
            self._lines.append(line)
        return line.copy()

    def apply(self, line_id: str, edit: IngredientEdit) -> IngredientLine:
        index = self._index_of(line_id)
        updated = apply_edit(self._lines[index], edit, self.catalog)
        self._lines[index] = updated
        return updated.copy()

    def remove(self, line_id: str) -> None:
        del self._lines[self._index_of(line_id)]

    def move(self, line_id: str, new_index: int) -> None:
        line = self._lines.pop(self._index_of(line_id))
        self._lines.insert(max(0, min(new_index, len(self._lines))), line)

    def reset(self) -> None:
        self._lines = [blank_line()]

    def replace_all(self, lines: Iterable[IngredientLine]) -> None:
        self._lines = [line.copy() for line in lines]

    # --- Aggregates ---

    def grand_total(self) -> Decimal:
        """Sum of extension costs over lines that are fully costed."""
        return sum((line.extension_cost for line in self._lines if line.is_costed), ZERO)
