"""Abstract read-only item catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from reagent_bank.domain.model.item import ItemDefinition

UNKNOWN_ITEM_NAME = "Unknown"


class ItemCatalog(ABC):

    @abstractmethod
    def lookup(self, item_id: int) -> ItemDefinition | None:
        """Return the definition of an item, or None if the catalog lacks it."""

    def display_name(self, item_id: int, locale: str | None = None) -> str:
        definition = self.lookup(item_id)
        if definition is None:
            return UNKNOWN_ITEM_NAME
        return definition.localized_name(locale)
