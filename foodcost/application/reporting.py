"""Cost report workflows for the live table and saved recipes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.pricing import PricingCalculator, PricingMethod
from foodcost.domain.recipe import restore_state
from foodcost.report.cost_report import CostReport, build_cost_report
from foodcost.runtime.report_export import write_cost_report_csv

if TYPE_CHECKING:
    from foodcost.application.workspace import CostingWorkspace

ExportStatus = Literal["recipe_not_found", "exported"]


@dataclass(frozen=True)
class RecipeExportResult:
    status: ExportStatus
    path: Path | None = None
    error: str | None = None


def run_cost_report(workspace: CostingWorkspace) -> CostReport:
    """Report for the table currently on screen."""
    return build_cost_report(workspace.ledger, workspace.calculator)


def saved_recipe_report(
    workspace: CostingWorkspace,
    recipe_id: str,
    method: PricingMethod = PricingMethod.COST_PERCENTAGE,
) -> CostReport | None:
    """Report for a saved recipe without disturbing the live table."""
    recipe = workspace.recipes.get(recipe_id)
    if recipe is None:
        return None
    ledger = IngredientLedger()
    calculator = PricingCalculator(ledger, method=method)
    restore_state(recipe.state, ledger, calculator)
    return build_cost_report(ledger, calculator)


def run_recipe_export(
    workspace: CostingWorkspace,
    recipe_id: str,
    path: Path,
    method: PricingMethod = PricingMethod.COST_PERCENTAGE,
) -> RecipeExportResult:
    report = saved_recipe_report(workspace, recipe_id, method=method)
    if report is None:
        return RecipeExportResult(status="recipe_not_found", error=f"Recipe not found: {recipe_id}")
    written = write_cost_report_csv(report, path, workspace.settings.currency_symbol)
    return RecipeExportResult(status="exported", path=written)
