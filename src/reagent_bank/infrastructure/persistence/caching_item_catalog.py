"""Memoizing decorator for an ItemCatalog."""

from __future__ import annotations

import threading

from reagent_bank.domain.model.item import ItemDefinition
from reagent_bank.domain.repository.item_catalog import ItemCatalog


class CachingItemCatalog(ItemCatalog):
    """Remembers every lookup of the wrapped catalog, misses included."""

    def __init__(self, inner: ItemCatalog) -> None:
        self._inner = inner
        self._lock = threading.Lock()
        self._cache: dict[int, ItemDefinition | None] = {}

    def lookup(self, item_id: int) -> ItemDefinition | None:
        with self._lock:
            if item_id in self._cache:
                return self._cache[item_id]
        definition = self._inner.lookup(item_id)
        with self._lock:
            self._cache.setdefault(item_id, definition)
        return definition

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
