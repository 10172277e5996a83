"""Persistence of saved recipes through the key-value store."""

import json

from foodcost.domain.recipe import RecipeBook, SavedRecipe
from foodcost.runtime.kv_store import KeyValueStore
from foodcost.runtime.logging import get_logger

logger = get_logger(__name__)

RECIPES_KEY = "foodCostingRecipes"


def load_recipes(store: KeyValueStore) -> RecipeBook:
    """Load saved recipes; any read or parse failure yields an empty book."""
    try:
        raw = store.get(RECIPES_KEY)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read recipes from store: %s", e)
        return RecipeBook()

    if raw is None:
        return RecipeBook()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse stored recipes: %s", e)
        return RecipeBook()

    if not isinstance(data, list):
        logger.error("Stored recipes are not a list; starting empty")
        return RecipeBook()

    recipes = [SavedRecipe.from_dict(entry) for entry in data if isinstance(entry, dict)]
    logger.debug("Loaded %d saved recipes", len(recipes))
    return RecipeBook(recipes)


def save_recipes(store: KeyValueStore, book: RecipeBook) -> bool:
    """Rewrite the stored recipe list. Returns False if the write failed."""
    payload = json.dumps([recipe.to_dict() for recipe in book], indent=2, ensure_ascii=False)
    try:
        store.set(RECIPES_KEY, payload)
    except OSError as e:
        logger.error("Failed to save recipes: %s", e)
        return False
    return True
