"""Application service: Browse Category use case (query)."""

from __future__ import annotations

from reagent_bank.application.dto import CategoryPageDTO, LedgerLineDTO
from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.model.pagination import paginate, sort_for_display
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.repository.ledger_repository import LedgerRepository


class BrowseCategoryHandler:

    def __init__(
        self,
        ledger_repo: LedgerRepository,
        catalog: ItemCatalog,
        page_size: int,
    ) -> None:
        self._ledger_repo = ledger_repo
        self._catalog = catalog
        self._page_size = page_size

    def handle(
        self,
        owner: OwnerKey,
        category: Category,
        page: int = 0,
        locale: str | None = None,
    ) -> CategoryPageDTO:
        """Return one page of a category, sorted by display name.

        An out-of-range ``page`` is clamped to the nearest valid page.
        """
        entries = {e.item_id: e for e in self._ledger_repo.scan_by_category(owner, category)}

        names = {item_id: self._catalog.display_name(item_id, locale) for item_id in entries}
        ordered = sort_for_display(list(entries), names.__getitem__)
        window = paginate(len(ordered), self._page_size, page)

        lines = []
        for item_id in ordered[window.start:window.end]:
            definition = self._catalog.lookup(item_id)
            lines.append(
                LedgerLineDTO(
                    item_id=item_id,
                    name=names[item_id],
                    quantity=entries[item_id].quantity,
                    category=category.label,
                    quality=definition.quality if definition else 0,
                )
            )

        return CategoryPageDTO(
            category=int(category),
            label=category.label,
            page_index=window.page_index,
            total_pages=window.total_pages,
            total_types=len(ordered),
            total_quantity=sum(e.quantity for e in entries.values()),
            lines=lines,
            has_next=window.has_next,
            has_previous=window.has_previous,
        )
