"""Application service: Show Item use case (query)."""

from __future__ import annotations

from reagent_bank.application.dto import ItemDetailDTO
from reagent_bank.domain.exceptions import ItemDefinitionMissing
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.repository.ledger_repository import LedgerRepository


class ShowItemHandler:

    def __init__(self, ledger_repo: LedgerRepository, catalog: ItemCatalog) -> None:
        self._ledger_repo = ledger_repo
        self._catalog = catalog

    def handle(self, owner: OwnerKey, item_id: int, locale: str | None = None) -> ItemDetailDTO:
        definition = self._catalog.lookup(item_id)
        if definition is None:
            raise ItemDefinitionMissing(item_id)

        entry = self._ledger_repo.get(owner, item_id)
        category = definition.category
        return ItemDetailDTO(
            item_id=item_id,
            name=definition.localized_name(locale),
            stored=entry.quantity if entry else 0,
            max_stack_size=definition.max_stack_size,
            category=int(category) if category is not None else 0,
            quality=definition.quality,
        )
