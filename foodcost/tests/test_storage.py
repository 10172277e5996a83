"""Tests for key-value persistence of the catalog and saved recipes."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from foodcost.application.workspace import CostingWorkspace
from foodcost.domain.recipe import RecipeBook, RecipeState
from foodcost.runtime.catalog_storage import (
    CATALOG_KEY,
    default_catalog_items,
    load_catalog,
    persist_on_change,
    save_catalog,
)
from foodcost.runtime.kv_store import JsonFileStore, MemoryStore
from foodcost.runtime.recipe_storage import RECIPES_KEY, load_recipes, save_recipes
from foodcost.runtime.settings import Settings


class _BrokenStore:
    def get(self, key: str) -> str | None:
        raise OSError("disk on fire")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk on fire")


def test_json_file_store_round_trip(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "store")
    assert store.get("missing") is None

    store.set("foodCostingMarketList", "[1, 2]")
    assert store.get("foodCostingMarketList") == "[1, 2]"
    assert (tmp_path / "store" / "foodCostingMarketList.json").exists()
    assert not list((tmp_path / "store").glob("*.tmp"))


def test_json_file_store_sanitizes_keys(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.set("../escape", "x")
    assert store.get("../escape") == "x"
    assert not (tmp_path.parent / "escape.json").exists()


def test_missing_catalog_uses_seed() -> None:
    catalog = load_catalog(MemoryStore())
    assert [item.name for item in catalog] == ["Flour", "Sugar", "Eggs", "Butter", "Milk"]
    eggs = catalog.get("3")
    assert eggs.price == Decimal("7")
    assert eggs.unit == "pc"


def test_unreadable_catalog_uses_seed() -> None:
    assert len(load_catalog(_BrokenStore())) == len(default_catalog_items())
    assert len(load_catalog(MemoryStore({CATALOG_KEY: "{not json"}))) == 5
    assert len(load_catalog(MemoryStore({CATALOG_KEY: '{"a": 1}'}))) == 5


def test_stored_catalog_is_loaded() -> None:
    store = MemoryStore({CATALOG_KEY: json.dumps([{"id": "a", "name": "Rice", "price": "55", "unit": "kg"}])})
    catalog = load_catalog(store)
    assert [item.name for item in catalog] == ["Rice"]
    assert catalog.get("a").price == Decimal("55")


def test_every_catalog_change_is_persisted() -> None:
    store = MemoryStore()
    catalog = load_catalog(store)
    persist_on_change(store, catalog)

    catalog.update("1", price="95")
    saved = json.loads(store.data[CATALOG_KEY])
    assert saved[0] == {"id": "1", "name": "Flour", "price": "95", "unit": "kg"}

    catalog.remove("2")
    assert len(json.loads(store.data[CATALOG_KEY])) == 4


def test_failed_catalog_write_is_not_fatal() -> None:
    catalog = load_catalog(MemoryStore())
    assert save_catalog(_BrokenStore(), catalog) is False


def test_recipes_round_trip_through_store() -> None:
    store = MemoryStore()
    book = RecipeBook()
    book.save("Cookies", RecipeState(lines=(), selling_price=Decimal("120.50"), yield_count=Decimal("12")))
    assert save_recipes(store, book) is True

    loaded = load_recipes(store)
    assert [r.name for r in loaded] == ["Cookies"]
    assert loaded.list()[0].state.selling_price == Decimal("120.5")


def test_unreadable_recipes_give_empty_book() -> None:
    assert len(load_recipes(MemoryStore())) == 0
    assert len(load_recipes(MemoryStore({RECIPES_KEY: "garbage"}))) == 0
    assert len(load_recipes(_BrokenStore())) == 0
    assert save_recipes(_BrokenStore(), RecipeBook()) is False


def _write_undecodable(store_dir: Path, key: str) -> None:
    store_dir.mkdir(parents=True, exist_ok=True)
    (store_dir / f"{key}.json").write_bytes(b"\xff\xfe[not utf8")


def test_undecodable_files_fall_back_to_defaults(tmp_path: Path) -> None:
    store_dir = tmp_path / "store"
    _write_undecodable(store_dir, CATALOG_KEY)
    _write_undecodable(store_dir, RECIPES_KEY)
    store = JsonFileStore(store_dir)

    assert [item.name for item in load_catalog(store)] == [item.name for item in default_catalog_items()]
    assert len(load_recipes(store)) == 0


def test_workspace_opens_over_undecodable_store(tmp_path: Path) -> None:
    store_dir = tmp_path / "store"
    _write_undecodable(store_dir, CATALOG_KEY)
    _write_undecodable(store_dir, RECIPES_KEY)

    ws = CostingWorkspace.open(store=JsonFileStore(store_dir), settings=Settings())
    assert len(ws.catalog) == len(default_catalog_items())
    assert len(ws.recipes) == 0


@pytest.mark.parametrize("ingredients", [5, "flour", {"name": "Flour"}, None])
def test_recipe_with_malformed_ingredients_loads_without_lines(ingredients: object) -> None:
    raw = [{"id": "r", "name": "Bread", "ingredients": ingredients, "sellingPrice": "60"}]
    book = load_recipes(MemoryStore({RECIPES_KEY: json.dumps(raw)}))

    [recipe] = book.list()
    assert recipe.name == "Bread"
    assert recipe.state.lines == ()
    assert recipe.state.selling_price == Decimal("60")
