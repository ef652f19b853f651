"""JSON-file-backed, read-only implementation of ItemCatalog."""

from __future__ import annotations

import logging
from pathlib import Path

from reagent_bank.domain.model.item import ItemDefinition
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.infrastructure.persistence.json_file import load_json

logger = logging.getLogger(__name__)


class JsonItemCatalog(ItemCatalog):
    """Loads every definition once; the catalog never changes at runtime."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._items = {
            definition.item_id: definition
            for definition in (self._to_domain(raw) for raw in load_json(file_path, []))
        }
        logger.debug("Loaded %d item definition(s) from %s", len(self._items), file_path)

    def lookup(self, item_id: int) -> ItemDefinition | None:
        return self._items.get(item_id)

    def find_by_name(self, name: str) -> ItemDefinition | None:
        for definition in self._items.values():
            if definition.name.lower() == name.lower():
                return definition
        return None

    @staticmethod
    def _to_domain(raw: dict) -> ItemDefinition:
        return ItemDefinition(
            item_id=raw["id"],
            name=raw["name"],
            item_class=raw["class"],
            item_subclass=raw.get("subclass", 0),
            max_stack_size=raw.get("max_stack", 1),
            quality=raw.get("quality", 1),
            names=dict(raw.get("names", {})),
        )
