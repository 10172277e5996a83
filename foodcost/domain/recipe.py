"""Saved-recipe snapshots of the costing table."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from foodcost.domain.ingredient import IngredientLine, new_line_id
from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.numbers import coerce_yield, format_plain, non_negative
from foodcost.domain.pricing import PricingCalculator


@dataclass(frozen=True)
class RecipeState:
    """Lines, selling price and yield, detached from the live ledger."""

    lines: tuple[IngredientLine, ...]
    selling_price: Decimal
    yield_count: Decimal


@dataclass(frozen=True)
class SavedRecipe:
    id: str
    name: str
    state: RecipeState
    created_at: dt.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ingredients": [line.to_dict() for line in self.state.lines],
            "sellingPrice": format_plain(self.state.selling_price),
            "recipeYield": format_plain(self.state.yield_count),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedRecipe:
        raw_created = str(data.get("createdAt") or "")
        try:
            created_at = dt.datetime.fromisoformat(raw_created.replace("Z", "+00:00"))
        except ValueError:
            created_at = dt.datetime.fromtimestamp(0, tz=dt.timezone.utc)
        raw_lines = data.get("ingredients")
        if not isinstance(raw_lines, list):
            raw_lines = []
        state = RecipeState(
            lines=tuple(IngredientLine.from_dict(raw) for raw in raw_lines if isinstance(raw, dict)),
            selling_price=non_negative(data.get("sellingPrice")),
            yield_count=coerce_yield(data.get("recipeYield")),
        )
        return cls(
            id=str(data.get("id") or new_line_id()),
            name=str(data.get("name") or ""),
            state=state,
            created_at=created_at,
        )


def capture_state(ledger: IngredientLedger, calculator: PricingCalculator) -> RecipeState:
    return RecipeState(
        lines=ledger.lines,
        selling_price=calculator.selling_price,
        yield_count=calculator.yield_count,
    )


def restore_state(state: RecipeState, ledger: IngredientLedger, calculator: PricingCalculator) -> None:
    """Replace the live table with ``state``; nothing is merged."""
    ledger.replace_all(state.lines)
    calculator.set_selling_price(state.selling_price)
    calculator.set_yield(state.yield_count)


class RecipeBook:
    """Ordered list of saved recipes."""

    def __init__(self, recipes: Iterable[SavedRecipe] = ()) -> None:
        self._recipes: list[SavedRecipe] = list(recipes)

    def __iter__(self) -> Iterator[SavedRecipe]:
        return iter(tuple(self._recipes))

    def __len__(self) -> int:
        return len(self._recipes)

    def list(self) -> tuple[SavedRecipe, ...]:
        return tuple(self._recipes)

    def get(self, recipe_id: str) -> SavedRecipe | None:
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def save(
        self,
        name: str,
        state: RecipeState,
        recipe_id: str | None = None,
        now: dt.datetime | None = None,
    ) -> SavedRecipe:
        """Overwrite ``recipe_id`` if it exists, otherwise append a new recipe."""
        if not name or not name.strip():
            raise ValueError("Recipe name must not be blank")
        timestamp = now or dt.datetime.now(dt.timezone.utc)

        if recipe_id is not None:
            for i, existing in enumerate(self._recipes):
                if existing.id == recipe_id:
                    updated = replace(existing, name=name, state=state, created_at=timestamp)
                    self._recipes[i] = updated
                    return updated

        recipe = SavedRecipe(id=new_line_id(), name=name, state=state, created_at=timestamp)
        self._recipes.append(recipe)
        return recipe

    def delete(self, recipe_id: str) -> bool:
        before = len(self._recipes)
        self._recipes = [r for r in self._recipes if r.id != recipe_id]
        return len(self._recipes) != before
