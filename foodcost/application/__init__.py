"""Costing workflows."""

from foodcost.application.recipe_import import RecipeImportRequest, RecipeImportResult, run_recipe_import
from foodcost.application.reporting import run_cost_report, run_recipe_export, saved_recipe_report
from foodcost.application.workspace import CostingWorkspace

__all__ = [
    "CostingWorkspace",
    "RecipeImportRequest",
    "RecipeImportResult",
    "run_recipe_import",
    "run_cost_report",
    "run_recipe_export",
    "saved_recipe_report",
]
