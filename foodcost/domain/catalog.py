"""Reference price list (the market list) that ledger lines reconcile against."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import replace
from decimal import Decimal
from typing import Any

from foodcost.domain.ingredient import CatalogItem, new_line_id, normalize_name
from foodcost.domain.numbers import non_negative

CatalogListener = Callable[["PriceCatalog"], None]


class CatalogItemNotFoundError(KeyError):
    """Raised when a catalog id does not exist."""


class PriceCatalog:
    """Ordered, user-managed list of catalog items.

    Order only matters for display. Name lookups are case- and
    whitespace-insensitive and the first matching entry wins.

    Every mutation notifies subscribed listeners after it has been applied,
    so observers always see a consistent list.
    """

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: list[CatalogItem] = list(items)
        self._listeners: list[CatalogListener] = []

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return tuple(self._items)

    # --- Observers ---

    def subscribe(self, listener: CatalogListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: CatalogListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- Lookup ---

    def get(self, item_id: str) -> CatalogItem:
        return self._items[self._index_of(item_id)]

    def find_by_name(self, name: str | None) -> CatalogItem | None:
        key = normalize_name(name)
        if not key:
            return None
        for item in self._items:
            if item.normalized_name == key:
                return item
        return None

    def by_normalized_name(self) -> dict[str, CatalogItem]:
        mapping: dict[str, CatalogItem] = {}
        for item in self._items:
            if item.normalized_name:
                mapping.setdefault(item.normalized_name, item)
        return mapping

    def _index_of(self, item_id: str) -> int:
        for i, item in enumerate(self._items):
            if item.id == item_id:
                return i
        raise CatalogItemNotFoundError(item_id)

    # --- Mutations ---

    def add(self, name: str = "New Item", price: Any = Decimal("0"), unit: str = "kg") -> CatalogItem:
        item = CatalogItem(id=new_line_id(), name=name, price=non_negative(price), unit=unit)
        self._items.append(item)
        self._notify()
        return item

    def update(
        self,
        item_id: str,
        *,
        name: str | None = None,
        price: Any = None,
        unit: str | None = None,
    ) -> CatalogItem:
        index = self._index_of(item_id)
        current = self._items[index]
        updated = replace(
            current,
            name=current.name if name is None else name,
            price=current.price if price is None else non_negative(price),
            unit=current.unit if unit is None else unit,
        )
        if updated == current:
            return current
        self._items[index] = updated
        self._notify()
        return updated

    def remove(self, item_id: str) -> None:
        del self._items[self._index_of(item_id)]
        self._notify()

    def move(self, item_id: str, new_index: int) -> None:
        index = self._index_of(item_id)
        item = self._items.pop(index)
        new_index = max(0, min(new_index, len(self._items)))
        self._items.insert(new_index, item)
        if new_index != index:
            self._notify()

    def replace_all(self, items: Iterable[CatalogItem]) -> None:
        self._items = list(items)
        self._notify()
