"""Core costing models and engines.

This package holds the pure costing logic:
- Unit conversion between purchase and recipe units
- IngredientLedger, PriceCatalog and ReconciliationEngine
- PricingCalculator and saved-recipe snapshots

Usage:
    from foodcost.domain import IngredientLedger, PriceCatalog, PricingCalculator
"""

from foodcost.domain.catalog import CatalogItemNotFoundError, PriceCatalog
from foodcost.domain.edits import (
    IngredientEdit,
    SetConversionFactorOverride,
    SetName,
    SetPurchasePrice,
    SetPurchaseUnit,
    SetQuantity,
    SetUnit,
    UnknownFieldError,
    edit_from_field,
)
from foodcost.domain.ingredient import CatalogItem, IngredientLine, ParsedIngredient
from foodcost.domain.ledger import IngredientLedger, LineNotFoundError
from foodcost.domain.pricing import CostSummary, PricingCalculator, PricingMethod
from foodcost.domain.recipe import RecipeBook, RecipeState, SavedRecipe, capture_state, restore_state
from foodcost.domain.reconciliation import ImportOutcome, ReconciliationEngine, lines_differ
from foodcost.domain.units import describe_conversion, resolve_conversion_factor

__all__ = [
    "CatalogItem",
    "CatalogItemNotFoundError",
    "CostSummary",
    "ImportOutcome",
    "IngredientEdit",
    "IngredientLedger",
    "IngredientLine",
    "LineNotFoundError",
    "ParsedIngredient",
    "PriceCatalog",
    "PricingCalculator",
    "PricingMethod",
    "RecipeBook",
    "RecipeState",
    "ReconciliationEngine",
    "SavedRecipe",
    "SetConversionFactorOverride",
    "SetName",
    "SetPurchasePrice",
    "SetPurchaseUnit",
    "SetQuantity",
    "SetUnit",
    "UnknownFieldError",
    "capture_state",
    "describe_conversion",
    "edit_from_field",
    "lines_differ",
    "resolve_conversion_factor",
    "restore_state",
]
