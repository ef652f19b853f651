"""Application service: Deposit Reagents use case."""

from __future__ import annotations

from reagent_bank.application.dto import TransferReport
from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.service.transfer_service import TransferService


class DepositReagentsHandler:

    def __init__(self, transfer: TransferService, catalog: ItemCatalog) -> None:
        self._transfer = transfer
        self._catalog = catalog

    def handle(
        self,
        owner: OwnerKey,
        inventory: ReceivingInventory,
        category: Category | None = None,
        locale: str | None = None,
    ) -> TransferReport:
        """Deposit every eligible reagent, or only those of ``category``."""
        result = self._transfer.deposit(owner, inventory, category)

        report = TransferReport()
        if result.is_empty:
            if category is None:
                report.add("No reagents to deposit.")
            else:
                report.add("No reagents to deposit in this category.")
            return report

        report.add("The following was deposited:")
        for item_id, amount in result.deposited.items():
            report.add(f"{amount} {self._catalog.display_name(item_id, locale)}")
            report.moved += amount
        return report
