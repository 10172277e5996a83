"""Tests for catalog sync and bulk import."""

from __future__ import annotations

from decimal import Decimal

from foodcost.domain.catalog import PriceCatalog
from foodcost.domain.edits import SetConversionFactorOverride
from foodcost.domain.ingredient import UNTITLED_INGREDIENT, CatalogItem, IngredientLine, ParsedIngredient
from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.pricing import PricingCalculator
from foodcost.domain.reconciliation import EMPTY_IMPORT_WARNING, ReconciliationEngine, lines_differ


def _setup() -> tuple[PriceCatalog, IngredientLedger, ReconciliationEngine]:
    catalog = PriceCatalog(
        [
            CatalogItem(id="1", name="Flour", price=Decimal("80"), unit="kg"),
            CatalogItem(id="3", name="Eggs", price=Decimal("7"), unit="pc"),
        ]
    )
    ledger = IngredientLedger(
        [
            IngredientLine(
                id="flour",
                name="Flour",
                quantity=Decimal("1000"),
                unit="g",
                purchase_price=Decimal("80"),
                purchase_unit="kg",
                conversion_factor=Decimal("1000"),
            )
        ],
        catalog=catalog,
    )
    engine = ReconciliationEngine(ledger, catalog)
    catalog.subscribe(engine.on_catalog_changed)
    return catalog, ledger, engine


def test_catalog_price_change_updates_matching_line() -> None:
    catalog, ledger, _engine = _setup()

    catalog.update("1", price="90")

    line = ledger.get("flour")
    assert line.purchase_price == Decimal("90")
    assert line.conversion_factor == Decimal("1000")
    assert line.quantity == Decimal("1000")
    assert line.unit == "g"
    assert ledger.grand_total() == Decimal("90")


def test_catalog_unit_change_recomputes_factor() -> None:
    catalog, ledger, _engine = _setup()
    catalog.update("1", unit="g")
    assert ledger.get("flour").conversion_factor == 1


def test_sync_reports_no_change_when_already_in_step() -> None:
    _catalog, _ledger, engine = _setup()
    assert engine.sync() is False


def test_sync_leaves_manual_override_when_price_unchanged() -> None:
    _catalog, ledger, engine = _setup()
    ledger.apply("flour", SetConversionFactorOverride(Decimal("500")))
    assert engine.sync() is False
    assert ledger.get("flour").conversion_factor == Decimal("500")


def test_detached_engine_ignores_catalog_changes() -> None:
    catalog, ledger, engine = _setup()
    engine.detach()

    catalog.update("1", price="120")
    assert ledger.get("flour").purchase_price == Decimal("80")

    engine.attach()
    assert engine.sync() is True
    assert ledger.get("flour").purchase_price == Decimal("120")


def test_reset_resumes_sync() -> None:
    _catalog, ledger, engine = _setup()
    engine.detach()
    engine.reset()
    assert engine.attached
    assert len(ledger) == 1
    assert ledger.lines[0].is_placeholder


def test_import_builds_lines_from_catalog() -> None:
    _catalog, ledger, engine = _setup()
    engine.detach()

    outcome = engine.import_parsed(
        [
            ParsedIngredient(name="flour", quantity=Decimal("250"), unit="g"),
            ParsedIngredient(name="Eggs", quantity=Decimal("2"), unit="pieces"),
            ParsedIngredient(name="Vanilla", quantity=None, unit="tsp"),
            ParsedIngredient(name="  ", quantity=Decimal("-1"), unit=None),
        ]
    )

    assert outcome.applied
    assert outcome.imported == 4
    assert engine.attached

    flour, eggs, vanilla, untitled = ledger.lines
    assert flour.purchase_price == Decimal("80")
    assert flour.conversion_factor == Decimal("1000")
    assert flour.extension_cost == Decimal("20")

    assert eggs.unit == "pc"
    assert eggs.purchase_unit == "pc"
    assert eggs.extension_cost == Decimal("14")

    assert vanilla.quantity == 1
    assert vanilla.purchase_price == 0
    assert vanilla.purchase_unit == "kg"
    assert vanilla.conversion_factor == 1

    assert untitled.name == UNTITLED_INGREDIENT
    assert untitled.quantity == 1
    assert untitled.unit == "pc"


def test_empty_import_leaves_everything_unchanged() -> None:
    _catalog, ledger, engine = _setup()
    calculator = PricingCalculator(ledger, selling_price="200", yield_count="4")
    before = ledger.lines

    outcome = engine.import_parsed([])

    assert not outcome.applied
    assert outcome.warning == EMPTY_IMPORT_WARNING
    assert not lines_differ(before, ledger.lines)
    assert calculator.selling_price == Decimal("200")
    assert calculator.yield_count == Decimal("4")


def test_lines_differ() -> None:
    _catalog, ledger, _engine = _setup()
    lines = ledger.lines
    assert not lines_differ(lines, ledger.lines)
    assert lines_differ(lines, ())
