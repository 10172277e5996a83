"""Keeps ledger lines in step with the price catalog.

Two entry points:

- ``sync()`` re-derives purchase price, purchase unit and conversion factor
  for every line whose name matches a catalog entry. It runs after each
  catalog change while the engine is attached.
- ``import_parsed()`` replaces the whole ledger with lines built from
  extracted ``{name, quantity, unit}`` triples, seeded from the catalog.

The engine detaches when a saved recipe is loaded so catalog price drift does
not silently rewrite a historical recipe. It re-attaches on ``reset()`` of the
table and after a successful bulk import; plain edits do not re-attach it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from decimal import Decimal

from foodcost.domain.catalog import PriceCatalog
from foodcost.domain.ingredient import (
    UNTITLED_INGREDIENT,
    CatalogItem,
    IngredientLine,
    ParsedIngredient,
    new_line_id,
    normalize_name,
)
from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.numbers import ZERO
from foodcost.domain.units import normalize_recipe_unit, resolve_conversion_factor

EMPTY_IMPORT_WARNING = "Ingredient extraction returned no ingredients; the table was left unchanged."

DEFAULT_IMPORT_PURCHASE_UNIT = "kg"


@dataclass(frozen=True)
class ImportOutcome:
    """Result of a bulk import attempt."""

    imported: int
    warning: str | None = None

    @property
    def applied(self) -> bool:
        return self.imported > 0


def lines_differ(before: Sequence[IngredientLine], after: Sequence[IngredientLine]) -> bool:
    """Structural comparison of two line sequences."""
    if len(before) != len(after):
        return True
    return any(a != b for a, b in zip(before, after))


def reconcile_line(line: IngredientLine, catalog_map: dict[str, CatalogItem]) -> IngredientLine:
    """Return ``line`` re-derived from its catalog entry, or unchanged."""
    if not line.name:
        return line
    item = catalog_map.get(line.normalized_name)
    if item is None:
        return line
    if line.purchase_price == item.price and line.purchase_unit == item.unit:
        return line
    return replace(
        line,
        purchase_price=item.price,
        purchase_unit=item.unit,
        conversion_factor=resolve_conversion_factor(item.unit, line.unit),
        factor_source="auto",
    )


def build_imported_line(parsed: ParsedIngredient, catalog_map: dict[str, CatalogItem]) -> IngredientLine:
    name = parsed.name.strip() if parsed.name and parsed.name.strip() else UNTITLED_INGREDIENT
    quantity = parsed.quantity if parsed.quantity is not None and parsed.quantity > 0 else Decimal("1")
    unit = normalize_recipe_unit(parsed.unit)

    match = catalog_map.get(normalize_name(name))
    purchase_unit = match.unit if match is not None and match.unit else DEFAULT_IMPORT_PURCHASE_UNIT
    purchase_price = match.price if match is not None else ZERO

    return IngredientLine(
        id=new_line_id(),
        name=name,
        quantity=quantity,
        unit=unit,
        purchase_price=purchase_price,
        purchase_unit=purchase_unit,
        conversion_factor=resolve_conversion_factor(purchase_unit, unit),
    )


class ReconciliationEngine:
    """Holds the ledger and catalog it reconciles; invoked on change events."""

    def __init__(self, ledger: IngredientLedger, catalog: PriceCatalog) -> None:
        self.ledger = ledger
        self.catalog = catalog
        self._attached = True

    @property
    def attached(self) -> bool:
        return self._attached

    def detach(self) -> None:
        """Stop catalog-driven updates (a saved recipe is on the table)."""
        self._attached = False

    def attach(self) -> None:
        self._attached = True

    def on_catalog_changed(self, catalog: PriceCatalog) -> None:
        """Catalog listener."""
        self.sync()

    def sync(self) -> bool:
        """Re-derive matching lines from the catalog; return whether anything changed."""
        if not self._attached:
            return False

        catalog_map = self.catalog.by_normalized_name()
        before = self.ledger.lines
        after = [reconcile_line(line, catalog_map) for line in before]
        if not lines_differ(before, after):
            return False
        self.ledger.replace_all(after)
        return True

    def reset(self) -> None:
        """Start a fresh table and resume catalog sync."""
        self.ledger.reset()
        self.attach()

    def import_parsed(self, parsed: Sequence[ParsedIngredient]) -> ImportOutcome:
        """Replace the ledger with imported lines; an empty input is a no-op."""
        if not parsed:
            return ImportOutcome(imported=0, warning=EMPTY_IMPORT_WARNING)

        catalog_map = self.catalog.by_normalized_name()
        lines = [build_imported_line(p, catalog_map) for p in parsed]
        self.ledger.replace_all(lines)
        self.attach()
        return ImportOutcome(imported=len(lines))
