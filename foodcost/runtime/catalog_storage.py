"""Persistence of the price catalog through the key-value store.

The whole list is rewritten on every catalog change. Read failures fall back
to the seed catalog; write failures are logged and otherwise ignored.
"""

import json
from decimal import Decimal

from foodcost.domain.catalog import PriceCatalog
from foodcost.domain.ingredient import CatalogItem
from foodcost.runtime.kv_store import KeyValueStore
from foodcost.runtime.logging import get_logger

logger = get_logger(__name__)

CATALOG_KEY = "foodCostingMarketList"


def default_catalog_items() -> list[CatalogItem]:
    """Seed market list used when nothing has been stored yet."""
    return [
        CatalogItem(id="1", name="Flour", price=Decimal("80"), unit="kg"),
        CatalogItem(id="2", name="Sugar", price=Decimal("90"), unit="kg"),
        CatalogItem(id="3", name="Eggs", price=Decimal("7"), unit="pc"),
        CatalogItem(id="4", name="Butter", price=Decimal("250"), unit="kg"),
        CatalogItem(id="5", name="Milk", price=Decimal("70"), unit="liter"),
    ]


def load_catalog_items(store: KeyValueStore) -> list[CatalogItem]:
    try:
        raw = store.get(CATALOG_KEY)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read market list from store: %s", e)
        return default_catalog_items()

    if raw is None:
        logger.debug("No stored market list; using seed catalog")
        return default_catalog_items()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse stored market list: %s", e)
        return default_catalog_items()

    if not isinstance(data, list):
        logger.error("Stored market list is not a list; using seed catalog")
        return default_catalog_items()

    return [CatalogItem.from_dict(entry) for entry in data if isinstance(entry, dict)]


def load_catalog(store: KeyValueStore) -> PriceCatalog:
    return PriceCatalog(load_catalog_items(store))


def save_catalog(store: KeyValueStore, catalog: PriceCatalog) -> bool:
    """Rewrite the stored market list. Returns False if the write failed."""
    payload = json.dumps([item.to_dict() for item in catalog.items], indent=2, ensure_ascii=False)
    try:
        store.set(CATALOG_KEY, payload)
    except OSError as e:
        logger.error("Failed to save market list: %s", e)
        return False
    logger.debug("Saved %d catalog items", len(catalog))
    return True


def persist_on_change(store: KeyValueStore, catalog: PriceCatalog) -> None:
    """Subscribe the catalog so every mutation is written back to ``store``."""
    catalog.subscribe(lambda changed: save_catalog(store, changed))
