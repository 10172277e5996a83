"""FastAPI server exposing one costing workspace over HTTP.

All handlers are coroutines without awaits between reading and writing the
workspace, so mutations are serialized on the event loop. Only the blocking
extraction call is pushed to a worker thread; its result is applied in one
step afterwards (last completed import wins).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from foodcost.application.recipe_import import Extractor, RecipeImportRequest, run_recipe_import
from foodcost.application.workspace import CostingWorkspace
from foodcost.domain.catalog import CatalogItemNotFoundError
from foodcost.domain.edits import UnknownFieldError, edit_from_field
from foodcost.domain.ledger import LineNotFoundError
from foodcost.domain.pricing import PricingMethod
from foodcost.runtime.extraction_client import ExtractionServiceUnavailable, extract_ingredients
from foodcost.runtime.logging import get_logger

logger = get_logger(__name__)


class CatalogItemBody(BaseModel):
    name: str = "New Item"
    price: Any = 0
    unit: str = "kg"


class CatalogItemPatch(BaseModel):
    name: str | None = None
    price: Any = None
    unit: str | None = None


class LineEditBody(BaseModel):
    field: str
    value: Any = None


class PricingBody(BaseModel):
    selling_price: Any = None
    target_percentage: Any = None
    pricing_factor: Any = None
    yield_count: Any = None
    method: PricingMethod | None = None


class ImportBody(BaseModel):
    text: str


class SaveRecipeBody(BaseModel):
    name: str


def _num(value: Decimal) -> str:
    return str(value)


def summary_payload(workspace: CostingWorkspace) -> dict[str, Any]:
    s = workspace.calculator.summary()
    return {
        "grand_total": _num(s.grand_total),
        "yield_count": _num(s.yield_count),
        "cost_per_serving": _num(s.cost_per_serving),
        "selling_price": _num(s.selling_price),
        "food_cost_percentage": _num(s.food_cost_percentage),
        "pricing_factor": _num(s.pricing_factor),
        "method": s.method.value,
        "current_recipe_id": workspace.current_recipe_id,
        "catalog_sync": workspace.engine.attached,
    }


def ingredients_payload(workspace: CostingWorkspace) -> list[dict[str, Any]]:
    rows = []
    for line in workspace.ledger.lines:
        row = line.to_dict()
        row["unitCost"] = _num(line.unit_cost)
        row["extensionCost"] = _num(line.extension_cost)
        rows.append(row)
    return rows


def create_app(workspace: CostingWorkspace | None = None, extractor: Extractor | None = None) -> FastAPI:
    """Build the app around ``workspace`` (opened from the default store if omitted)."""
    ws = workspace if workspace is not None else CostingWorkspace.open()

    def default_extractor(text: str) -> list:
        return extract_ingredients(text, ws.settings.extraction)

    extract = extractor or default_extractor

    app = FastAPI(title="Food Cost Calculator")
    app.state.workspace = ws

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    # --- Catalog ---

    @app.get("/catalog")
    async def list_catalog() -> list[dict[str, Any]]:
        return [item.to_dict() for item in ws.catalog]

    @app.post("/catalog", status_code=201)
    async def add_catalog_item(body: CatalogItemBody) -> dict[str, Any]:
        return ws.catalog.add(name=body.name, price=body.price, unit=body.unit).to_dict()

    @app.patch("/catalog/{item_id}")
    async def update_catalog_item(item_id: str, body: CatalogItemPatch) -> dict[str, Any]:
        try:
            item = ws.catalog.update(item_id, name=body.name, price=body.price, unit=body.unit)
        except CatalogItemNotFoundError:
            raise HTTPException(status_code=404, detail=f"Catalog item not found: {item_id}")
        return item.to_dict()

    @app.delete("/catalog/{item_id}")
    async def remove_catalog_item(item_id: str) -> dict[str, str]:
        try:
            ws.catalog.remove(item_id)
        except CatalogItemNotFoundError:
            raise HTTPException(status_code=404, detail=f"Catalog item not found: {item_id}")
        return {"status": "deleted"}

    # --- Ingredient lines ---

    @app.get("/ingredients")
    async def list_ingredients() -> list[dict[str, Any]]:
        return ingredients_payload(ws)

    @app.post("/ingredients", status_code=201)
    async def add_ingredient() -> dict[str, Any]:
        return ws.ledger.add_blank().to_dict()

    @app.post("/ingredients/from-catalog/{item_id}", status_code=201)
    async def add_ingredient_from_catalog(item_id: str) -> dict[str, Any]:
        try:
            item = ws.catalog.get(item_id)
        except CatalogItemNotFoundError:
            raise HTTPException(status_code=404, detail=f"Catalog item not found: {item_id}")
        return ws.ledger.add_from_catalog_item(item).to_dict()

    @app.patch("/ingredients/{line_id}")
    async def edit_ingredient(line_id: str, body: LineEditBody) -> dict[str, Any]:
        try:
            edit = edit_from_field(body.field, body.value)
        except UnknownFieldError as e:
            raise HTTPException(status_code=422, detail=str(e))
        try:
            line = ws.edit_line(line_id, edit)
        except LineNotFoundError:
            raise HTTPException(status_code=404, detail=f"Ingredient not found: {line_id}")
        return line.to_dict()

    @app.delete("/ingredients/{line_id}")
    async def remove_ingredient(line_id: str) -> dict[str, str]:
        try:
            ws.ledger.remove(line_id)
        except LineNotFoundError:
            raise HTTPException(status_code=404, detail=f"Ingredient not found: {line_id}")
        return {"status": "deleted"}

    @app.post("/reset")
    async def reset_table() -> dict[str, Any]:
        ws.reset_table()
        return summary_payload(ws)

    # --- Pricing ---

    @app.get("/summary")
    async def summary() -> dict[str, Any]:
        return summary_payload(ws)

    @app.put("/pricing")
    async def update_pricing(body: PricingBody) -> dict[str, Any]:
        calc = ws.calculator
        if body.method is not None:
            calc.method = body.method
        if body.yield_count is not None:
            calc.set_yield(body.yield_count)
        if body.selling_price is not None:
            calc.set_selling_price(body.selling_price)
        elif body.target_percentage is not None:
            calc.set_from_target_percentage(body.target_percentage)
        elif body.pricing_factor is not None:
            calc.set_from_pricing_factor(body.pricing_factor)
        return summary_payload(ws)

    # --- Import ---

    @app.post("/import")
    async def import_recipe(body: ImportBody) -> dict[str, Any]:
        if not body.text.strip():
            raise HTTPException(status_code=400, detail="Please paste a recipe first.")
        try:
            parsed = await run_in_threadpool(extract, body.text)
        except ExtractionServiceUnavailable as e:
            logger.error("Ingredient extraction failed: %s", e)
            raise HTTPException(status_code=502, detail=f"Failed to parse recipe. {e}")

        result = run_recipe_import(RecipeImportRequest(workspace=ws, text=body.text, extractor=lambda _text: parsed))
        if result.status != "imported":
            raise HTTPException(status_code=422, detail=result.error)
        return {"status": "imported", "imported": result.imported, "ingredients": ingredients_payload(ws)}

    # --- Saved recipes ---

    @app.get("/recipes")
    async def list_recipes() -> list[dict[str, Any]]:
        return [
            {"id": r.id, "name": r.name, "createdAt": r.created_at.isoformat(), "ingredients": len(r.state.lines)}
            for r in ws.recipes
        ]

    @app.post("/recipes", status_code=201)
    async def save_recipe(body: SaveRecipeBody) -> dict[str, Any]:
        try:
            recipe = ws.save_recipe(body.name)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        return recipe.to_dict()

    @app.post("/recipes/{recipe_id}/load")
    async def load_recipe(recipe_id: str) -> dict[str, Any]:
        if not ws.load_recipe(recipe_id):
            raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
        return summary_payload(ws)

    @app.delete("/recipes/{recipe_id}")
    async def delete_recipe(recipe_id: str) -> dict[str, str]:
        if not ws.delete_recipe(recipe_id):
            raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
        return {"status": "deleted"}

    return app
