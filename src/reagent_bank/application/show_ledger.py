"""Application service: Show Ledger use case (query)."""

from __future__ import annotations

from reagent_bank.application.dto import LedgerLineDTO
from reagent_bank.domain.model.category import MENU_ORDER
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.model.pagination import sort_for_display
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.repository.ledger_repository import LedgerRepository


class ShowLedgerHandler:

    def __init__(self, ledger_repo: LedgerRepository, catalog: ItemCatalog) -> None:
        self._ledger_repo = ledger_repo
        self._catalog = catalog

    def handle(self, owner: OwnerKey, locale: str | None = None) -> list[LedgerLineDTO]:
        """Every stored reagent, grouped in menu category order."""
        def name_of(item_id: int) -> str:
            return self._catalog.display_name(item_id, locale)

        entries = self._ledger_repo.scan_all(owner)
        lines: list[LedgerLineDTO] = []
        for category in MENU_ORDER:
            in_category = {e.item_id: e for e in entries if e.category == category}
            for item_id in sort_for_display(list(in_category), name_of):
                lines.append(
                    LedgerLineDTO(
                        item_id=item_id,
                        name=name_of(item_id),
                        quantity=in_category[item_id].quantity,
                        category=category.label,
                        quality=self._quality(item_id),
                    )
                )
        return lines

    def _quality(self, item_id: int) -> int:
        definition = self._catalog.lookup(item_id)
        return definition.quality if definition else 0
