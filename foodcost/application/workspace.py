"""The live costing table plus its catalog, pricing and saved recipes.

A workspace is the single owner of all mutable costing state. Every mutating
call runs to completion before the next one starts; callers on threaded
servers must serialize access to one workspace.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from foodcost.domain.catalog import PriceCatalog
from foodcost.domain.edits import IngredientEdit
from foodcost.domain.ingredient import IngredientLine, ParsedIngredient
from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.pricing import PricingCalculator
from foodcost.domain.recipe import RecipeBook, SavedRecipe, capture_state, restore_state
from foodcost.domain.reconciliation import ImportOutcome, ReconciliationEngine
from foodcost.domain.units import describe_conversion
from foodcost.runtime.catalog_storage import load_catalog, persist_on_change
from foodcost.runtime.kv_store import JsonFileStore, KeyValueStore
from foodcost.runtime.logging import get_logger
from foodcost.runtime.recipe_storage import load_recipes, save_recipes
from foodcost.runtime.settings import Settings, load_settings

logger = get_logger(__name__)


@dataclass
class CostingWorkspace:
    store: KeyValueStore
    catalog: PriceCatalog
    ledger: IngredientLedger
    engine: ReconciliationEngine
    calculator: PricingCalculator
    recipes: RecipeBook
    settings: Settings = field(default_factory=Settings)
    current_recipe_id: str | None = None

    @classmethod
    def open(cls, store: KeyValueStore | None = None, settings: Settings | None = None) -> CostingWorkspace:
        """Load catalog and recipes from ``store`` and start with a blank table."""
        if store is None:
            store = JsonFileStore()
        if settings is None:
            settings = load_settings()

        catalog = load_catalog(store)
        ledger = IngredientLedger(catalog=catalog)
        engine = ReconciliationEngine(ledger, catalog)
        workspace = cls(
            store=store,
            catalog=catalog,
            ledger=ledger,
            engine=engine,
            calculator=PricingCalculator(ledger),
            recipes=load_recipes(store),
            settings=settings,
        )

        persist_on_change(store, catalog)
        catalog.subscribe(engine.on_catalog_changed)
        workspace.reset_table()
        return workspace

    @property
    def current_recipe(self) -> SavedRecipe | None:
        if self.current_recipe_id is None:
            return None
        return self.recipes.get(self.current_recipe_id)

    def reset_table(self) -> None:
        """One blank line, no price, yield 1, nothing loaded; catalog sync resumes."""
        self.engine.reset()
        self.calculator.set_selling_price(0)
        self.calculator.set_yield(1)
        self.current_recipe_id = None

    def save_recipe(self, name: str) -> SavedRecipe:
        """Save the table, overwriting the loaded recipe if there is one."""
        recipe = self.recipes.save(
            name,
            capture_state(self.ledger, self.calculator),
            recipe_id=self.current_recipe_id,
        )
        self.current_recipe_id = recipe.id
        save_recipes(self.store, self.recipes)
        logger.info("Saved recipe %r (%s)", recipe.name, recipe.id)
        return recipe

    def load_recipe(self, recipe_id: str) -> bool:
        """Replace the table with a saved recipe and stop catalog sync."""
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            logger.warning("Recipe not found: %s", recipe_id)
            return False
        restore_state(recipe.state, self.ledger, self.calculator)
        self.engine.detach()
        self.current_recipe_id = recipe.id
        logger.info("Loaded recipe %r; catalog sync suspended", recipe.name)
        return True

    def delete_recipe(self, recipe_id: str) -> bool:
        if not self.recipes.delete(recipe_id):
            return False
        save_recipes(self.store, self.recipes)
        if self.current_recipe_id == recipe_id:
            self.reset_table()
        return True

    def edit_line(self, line_id: str, edit: IngredientEdit) -> IngredientLine:
        """Apply one typed edit to a ledger line."""
        line = self.ledger.apply(line_id, edit)
        if line.factor_source == "auto" and line.purchase_unit.strip().lower() != line.unit.strip().lower():
            if not describe_conversion(line.purchase_unit, line.unit).resolved:
                logger.warning(
                    "No automatic conversion from %s to %s for %r; enter a conversion factor manually",
                    line.purchase_unit,
                    line.unit,
                    line.name,
                )
        return line

    def import_parsed(self, parsed: Sequence[ParsedIngredient]) -> ImportOutcome:
        """Replace the table with imported ingredients; the result is a new, unsaved recipe."""
        outcome = self.engine.import_parsed(parsed)
        if outcome.applied:
            self.current_recipe_id = None
            logger.info("Imported %d ingredients", outcome.imported)
        else:
            logger.warning("%s", outcome.warning)
        return outcome
