"""Runtime infrastructure for the food cost calculator.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Settings loading via load_settings()
- Key-value persistence for the price catalog and saved recipes

Usage:
    from foodcost.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.store)
"""

from foodcost.runtime.catalog_storage import (
    CATALOG_KEY,
    default_catalog_items,
    load_catalog,
    load_catalog_items,
    persist_on_change,
    save_catalog,
)
from foodcost.runtime.kv_store import JsonFileStore, KeyValueStore, MemoryStore
from foodcost.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from foodcost.runtime.paths import ProjectPaths, get_paths, reset_paths
from foodcost.runtime.recipe_storage import RECIPES_KEY, load_recipes, save_recipes
from foodcost.runtime.settings import ExtractionSettings, Settings, load_settings

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
    # Settings
    "ExtractionSettings",
    "Settings",
    "load_settings",
    # Storage
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "CATALOG_KEY",
    "RECIPES_KEY",
    "default_catalog_items",
    "load_catalog_items",
    "load_catalog",
    "save_catalog",
    "persist_on_change",
    "load_recipes",
    "save_recipes",
]
