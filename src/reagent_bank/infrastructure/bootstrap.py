"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from reagent_bank.application.bank_menu import BankMenu
from reagent_bank.application.browse_category import BrowseCategoryHandler
from reagent_bank.application.deposit_reagents import DepositReagentsHandler
from reagent_bank.application.owner_lanes import OwnerLanes
from reagent_bank.application.show_item import ShowItemHandler
from reagent_bank.application.show_ledger import ShowLedgerHandler
from reagent_bank.application.withdraw_reagents import WithdrawReagentsHandler
from reagent_bank.domain.model.config import BankConfig
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.service.transfer_service import TransferService
from reagent_bank.infrastructure.persistence.caching_item_catalog import CachingItemCatalog
from reagent_bank.infrastructure.persistence.json_character_inventory import (
    JsonCharacterInventory,
)
from reagent_bank.infrastructure.persistence.json_item_catalog import JsonItemCatalog
from reagent_bank.infrastructure.persistence.json_ledger_repository import (
    JsonLedgerRepository,
)


@dataclass
class BankServices:
    config: BankConfig
    catalog: JsonItemCatalog
    ledger_repo: JsonLedgerRepository
    transfer: TransferService
    lanes: OwnerLanes
    browse: BrowseCategoryHandler
    show_item: ShowItemHandler
    show_ledger: ShowLedgerHandler
    deposit: DepositReagentsHandler
    withdraw: WithdrawReagentsHandler
    menu: BankMenu

    def owner_for(self, account_id: int, character_id: int) -> OwnerKey:
        return OwnerKey.for_player(account_id, character_id, self.config.account_wide)

    def character_inventory(self, character_id: int) -> JsonCharacterInventory:
        return JsonCharacterInventory(
            self.config.data_dir / "characters" / f"{character_id}.json"
        )

    def shutdown(self) -> None:
        self.lanes.shutdown(wait=True)


def build_services(config: BankConfig) -> BankServices:
    source_catalog = JsonItemCatalog(config.data_dir / "items.json")
    catalog = CachingItemCatalog(source_catalog)
    ledger_repo = JsonLedgerRepository(config.data_dir / "ledger.json")

    transfer = TransferService(ledger_repo, catalog)
    lanes = OwnerLanes(max_workers=config.lane_workers)

    browse = BrowseCategoryHandler(ledger_repo, catalog, config.page_size)
    show_item = ShowItemHandler(ledger_repo, catalog)
    deposit = DepositReagentsHandler(transfer, catalog)
    withdraw = WithdrawReagentsHandler(transfer)

    return BankServices(
        config=config,
        catalog=source_catalog,
        ledger_repo=ledger_repo,
        transfer=transfer,
        lanes=lanes,
        browse=browse,
        show_item=show_item,
        show_ledger=ShowLedgerHandler(ledger_repo, catalog),
        deposit=deposit,
        withdraw=withdraw,
        menu=BankMenu(browse, show_item, deposit, withdraw, lanes),
    )
