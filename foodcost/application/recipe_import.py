"""Recipe text import workflow: extract ingredients, then replace the table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from foodcost.domain.ingredient import ParsedIngredient
from foodcost.runtime.extraction_client import ExtractionServiceUnavailable, extract_ingredients
from foodcost.runtime.logging import get_logger

if TYPE_CHECKING:
    from foodcost.application.workspace import CostingWorkspace

logger = get_logger(__name__)

ImportStatus = Literal[
    "empty_text",
    "service_unavailable",
    "empty_result",
    "imported",
]

EMPTY_TEXT_MESSAGE = "Please paste a recipe first."
EMPTY_RESULT_MESSAGE = (
    "The AI could not identify any ingredients. Please check your recipe text and try again."
)

Extractor = Callable[[str], list[ParsedIngredient]]


@dataclass(frozen=True)
class RecipeImportRequest:
    """Inputs for running the recipe import workflow."""

    workspace: CostingWorkspace
    text: str
    extractor: Extractor | None = None


@dataclass(frozen=True)
class RecipeImportResult:
    """Outcome of the recipe import workflow."""

    status: ImportStatus
    imported: int = 0
    error: str | None = None


def _service_extractor(workspace: CostingWorkspace) -> Extractor:
    settings = workspace.settings.extraction

    def extract(text: str) -> list[ParsedIngredient]:
        return extract_ingredients(text, settings)

    return extract


def run_recipe_import(request: RecipeImportRequest) -> RecipeImportResult:
    """Run import flow: extract -> validate -> replace ledger.

    The ledger is only touched when extraction produced at least one ingredient.
    """
    if not request.text.strip():
        return RecipeImportResult(status="empty_text", error=EMPTY_TEXT_MESSAGE)

    extractor = request.extractor or _service_extractor(request.workspace)
    try:
        parsed = extractor(request.text)
    except ExtractionServiceUnavailable as exc:
        logger.error("Ingredient extraction failed: %s", exc)
        return RecipeImportResult(status="service_unavailable", error=f"Failed to parse recipe. {exc}")

    if not parsed:
        logger.warning("Ingredient extraction returned an empty list")
        return RecipeImportResult(status="empty_result", error=f"Failed to parse recipe. {EMPTY_RESULT_MESSAGE}")

    outcome = request.workspace.import_parsed(parsed)
    return RecipeImportResult(status="imported", imported=outcome.imported)
