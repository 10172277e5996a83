"""Tests for the HTTP server."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from foodcost.application.server import create_app
from foodcost.application.workspace import CostingWorkspace
from foodcost.domain.ingredient import ParsedIngredient
from foodcost.runtime.extraction_client import ExtractionServiceUnavailable
from foodcost.runtime.kv_store import MemoryStore
from foodcost.runtime.settings import Settings


def _fake_extractor(text: str) -> list[ParsedIngredient]:
    if "broken" in text:
        raise ExtractionServiceUnavailable("Extraction service error: 500")
    if "nothing" in text:
        return []
    return [
        ParsedIngredient(name="Flour", quantity=Decimal("1000"), unit="g"),
        ParsedIngredient(name="Eggs", quantity=Decimal("2"), unit="pc"),
    ]


@pytest.fixture
def workspace() -> CostingWorkspace:
    return CostingWorkspace.open(store=MemoryStore(), settings=Settings())


@pytest.fixture
def client(workspace: CostingWorkspace) -> TestClient:
    return TestClient(create_app(workspace, extractor=_fake_extractor))


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_catalog_crud(client: TestClient) -> None:
    names = [item["name"] for item in client.get("/catalog").json()]
    assert names == ["Flour", "Sugar", "Eggs", "Butter", "Milk"]

    created = client.post("/catalog", json={"name": "Rice", "price": "55", "unit": "kg"})
    assert created.status_code == 201
    item_id = created.json()["id"]

    patched = client.patch(f"/catalog/{item_id}", json={"price": 60})
    assert patched.json()["price"] == "60"

    assert client.delete(f"/catalog/{item_id}").status_code == 200
    assert client.delete(f"/catalog/{item_id}").status_code == 404
    assert client.patch("/catalog/nope", json={"price": 1}).status_code == 404


def test_ingredient_editing_and_summary(client: TestClient) -> None:
    line_id = client.get("/ingredients").json()[0]["id"]

    assert client.patch(f"/ingredients/{line_id}", json={"field": "name", "value": "Flour"}).status_code == 200
    edited = client.patch(f"/ingredients/{line_id}", json={"field": "quantity", "value": "1000"}).json()
    assert edited["purchasePrice"] == "80"
    assert edited["conversionFactor"] == "1000"

    summary = client.put("/pricing", json={"target_percentage": 40, "yield_count": 8}).json()
    assert Decimal(summary["grand_total"]) == 80
    assert Decimal(summary["selling_price"]) == 200
    assert Decimal(summary["cost_per_serving"]) == 10
    assert Decimal(summary["pricing_factor"]) == Decimal("2.5")

    summary = client.put("/pricing", json={"method": "factorPricing"}).json()
    assert summary["method"] == "factorPricing"
    assert Decimal(summary["selling_price"]) == 200

    rows = client.get("/ingredients").json()
    assert Decimal(rows[0]["extensionCost"]) == 80


def test_ingredient_errors(client: TestClient) -> None:
    line_id = client.get("/ingredients").json()[0]["id"]
    assert client.patch(f"/ingredients/{line_id}", json={"field": "colour", "value": 1}).status_code == 422
    assert client.patch("/ingredients/nope", json={"field": "name", "value": "x"}).status_code == 404
    assert client.delete("/ingredients/nope").status_code == 404


def test_add_from_catalog_fills_blank_row(client: TestClient) -> None:
    response = client.post("/ingredients/from-catalog/3")
    assert response.status_code == 201
    assert response.json()["unit"] == "pc"
    assert len(client.get("/ingredients").json()) == 1

    client.post("/ingredients")
    assert len(client.get("/ingredients").json()) == 2
    assert client.post("/ingredients/from-catalog/nope").status_code == 404


def test_catalog_change_updates_ingredients(client: TestClient) -> None:
    client.post("/ingredients/from-catalog/1")
    client.patch("/catalog/1", json={"price": "90"})
    assert client.get("/ingredients").json()[0]["purchasePrice"] == "90"


def test_import(client: TestClient) -> None:
    response = client.post("/import", json={"text": "bread"})
    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == 2
    assert [row["name"] for row in body["ingredients"]] == ["Flour", "Eggs"]
    assert Decimal(client.get("/summary").json()["grand_total"]) == 94


def test_import_failures_leave_table(client: TestClient) -> None:
    client.post("/ingredients/from-catalog/1")
    before = client.get("/ingredients").json()

    empty = client.post("/import", json={"text": "   "})
    assert empty.status_code == 400
    assert empty.json()["detail"] == "Please paste a recipe first."

    broken = client.post("/import", json={"text": "broken"})
    assert broken.status_code == 502
    assert broken.json()["detail"].startswith("Failed to parse recipe.")

    nothing = client.post("/import", json={"text": "nothing"})
    assert nothing.status_code == 422

    assert client.get("/ingredients").json() == before


def test_recipe_lifecycle(client: TestClient, workspace: CostingWorkspace) -> None:
    client.post("/ingredients/from-catalog/1")
    client.put("/pricing", json={"selling_price": "150"})

    saved = client.post("/recipes", json={"name": "Bread"})
    assert saved.status_code == 201
    recipe_id = saved.json()["id"]
    assert client.post("/recipes", json={"name": " "}).status_code == 422

    listing = client.get("/recipes").json()
    assert [r["name"] for r in listing] == ["Bread"]

    reset = client.post("/reset").json()
    assert Decimal(reset["selling_price"]) == 0
    assert reset["current_recipe_id"] is None

    loaded = client.post(f"/recipes/{recipe_id}/load").json()
    assert Decimal(loaded["selling_price"]) == 150
    assert loaded["catalog_sync"] is False
    assert loaded["current_recipe_id"] == recipe_id

    assert client.post("/recipes/nope/load").status_code == 404
    assert client.delete(f"/recipes/{recipe_id}").status_code == 200
    assert client.delete(f"/recipes/{recipe_id}").status_code == 404
    assert workspace.current_recipe_id is None
