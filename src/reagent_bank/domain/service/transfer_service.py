"""Domain service: moving reagents between a character and the bank.

Every operation runs under the owner's lock and holds the ledger store
and the inventory exclusively for its whole duration, so read-modify-write
sequences never interleave, not even with other processes sharing the
same files. Locks are always taken in that order.

Deposits are staged: the carried stacks are tallied in memory, the new
totals are written in one atomic batch, and only then are the stacks
removed from the inventory. Withdrawals check capacity for the full
increment, write the ledger, then grant. A failing inventory call is
compensated on the ledger before the error propagates, so quantities
are never lost or duplicated.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager

from reagent_bank.domain.exceptions import CapacityExceeded, ItemDefinitionMissing
from reagent_bank.domain.model.category import MENU_ORDER, Category
from reagent_bank.domain.model.item import CarriedStack, ItemDefinition
from reagent_bank.domain.model.ledger import LedgerEntry, OwnerKey
from reagent_bank.domain.model.transfer import (
    CategoryWithdrawResult,
    DepositResult,
    WithdrawResult,
)
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.repository.ledger_repository import LedgerRepository
from reagent_bank.domain.service.owner_locks import OwnerLocks

logger = logging.getLogger(__name__)


class TransferService:

    def __init__(
        self,
        ledger_repo: LedgerRepository,
        catalog: ItemCatalog,
        locks: OwnerLocks | None = None,
    ) -> None:
        self._ledger_repo = ledger_repo
        self._catalog = catalog
        self._locks = locks or OwnerLocks()

    # --- Deposit --------------------------------------------------------------

    def deposit(
        self,
        owner: OwnerKey,
        inventory: ReceivingInventory,
        category: Category | None = None,
    ) -> DepositResult:
        """Move every eligible carried stack into the bank.

        With ``category`` set, only stacks of that category move.
        """
        with self._exclusive(owner, inventory):
            added, categories, removals = self._stage_deposit(inventory, category)
            if not added:
                logger.debug("Nothing to deposit for %s (category=%s)", owner, category)
                return DepositResult(category=category)

            entries: list[LedgerEntry] = []
            for item_id in sorted(added):
                existing = self._ledger_repo.get(owner, item_id)
                base = existing.quantity if existing is not None else 0
                entries.append(
                    LedgerEntry(owner, item_id, categories[item_id], base + added[item_id])
                )

            # Phase 1: persist the new totals as one unit
            self._ledger_repo.upsert_many(entries)

            # Phase 2: take the stacks out of the bags
            self._remove_staged(owner, inventory, entries, removals)

            logger.info(
                "Deposited %d item type(s) for %s: %s", len(added), owner, dict(added)
            )
            return DepositResult(
                category=category,
                deposited={item_id: added[item_id] for item_id in sorted(added)},
                totals={entry.item_id: entry.quantity for entry in entries},
            )

    def _stage_deposit(
        self,
        inventory: ReceivingInventory,
        category: Category | None,
    ) -> tuple[dict[int, int], dict[int, Category], list[CarriedStack]]:
        added: dict[int, int] = defaultdict(int)
        categories: dict[int, Category] = {}
        removals: list[CarriedStack] = []

        for stack in inventory.carried_stacks():
            definition = self._catalog.lookup(stack.item_id)
            if definition is None:
                logger.warning("Skipping carried item %d: not in catalog", stack.item_id)
                continue
            item_category = definition.category
            if item_category is None:
                continue
            if category is not None and item_category != category:
                continue
            added[stack.item_id] += stack.count
            categories[stack.item_id] = item_category
            removals.append(stack)

        return added, categories, removals

    def _remove_staged(
        self,
        owner: OwnerKey,
        inventory: ReceivingInventory,
        entries: list[LedgerEntry],
        removals: list[CarriedStack],
    ) -> None:
        for index, stack in enumerate(removals):
            try:
                inventory.remove_carried(stack.container, stack.slot)
            except Exception:
                logger.exception(
                    "Removing stack of item %d from bag %d slot %d failed; "
                    "reverting unremoved quantities for %s",
                    stack.item_id, stack.container, stack.slot, owner,
                )
                self._revert_unremoved(owner, entries, removals[index:])
                raise

    def _revert_unremoved(
        self,
        owner: OwnerKey,
        entries: list[LedgerEntry],
        unremoved: list[CarriedStack],
    ) -> None:
        still_carried: dict[int, int] = defaultdict(int)
        for stack in unremoved:
            still_carried[stack.item_id] += stack.count

        restored: list[LedgerEntry] = []
        emptied: list[int] = []
        for entry in entries:
            if entry.item_id not in still_carried:
                continue
            reverted = entry.with_quantity(entry.quantity - still_carried[entry.item_id])
            if reverted is None:
                emptied.append(entry.item_id)
            else:
                restored.append(reverted)

        if restored:
            self._ledger_repo.upsert_many(restored)
        for item_id in emptied:
            self._ledger_repo.delete(owner, item_id)

    # --- Single-item withdrawals ----------------------------------------------

    def withdraw_one(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> WithdrawResult:
        """Withdraw exactly one unit.

        Raises CapacityExceeded (ledger untouched) if it does not fit.
        """
        with self._exclusive(owner, inventory):
            entry = self._ledger_repo.get(owner, item_id)
            if entry is None:
                return WithdrawResult(item_id, self._catalog.display_name(item_id))
            definition = self._definition(item_id)
            after = self._give(owner, inventory, entry, definition, 1)
            return WithdrawResult(
                item_id=item_id,
                item_name=definition.name,
                granted=1,
                remaining=after.quantity if after else 0,
                stacks=(1,),
            )

    def withdraw_stack(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> WithdrawResult:
        """Withdraw one full stack, or everything stored if that is less.

        Raises CapacityExceeded (ledger untouched) if it does not fit.
        """
        with self._exclusive(owner, inventory):
            entry = self._ledger_repo.get(owner, item_id)
            if entry is None:
                return WithdrawResult(item_id, self._catalog.display_name(item_id))
            definition = self._definition(item_id)
            to_give = min(_stack_size(definition), entry.quantity)
            after = self._give(owner, inventory, entry, definition, to_give)
            return WithdrawResult(
                item_id=item_id,
                item_name=definition.name,
                granted=to_give,
                remaining=after.quantity if after else 0,
                stacks=(to_give,),
            )

    def withdraw_all_of_item(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> WithdrawResult:
        """Withdraw stack after stack until the item is gone or bags are full.

        Not all-or-nothing: every stack that fit stays granted and the
        ledger keeps exactly the rest.
        """
        with self._exclusive(owner, inventory):
            entry = self._ledger_repo.get(owner, item_id)
            if entry is None:
                return WithdrawResult(item_id, self._catalog.display_name(item_id))
            definition = self._definition(item_id)
            stack_size = _stack_size(definition)

            stacks: list[int] = []
            blocked = False
            current: LedgerEntry | None = entry
            while current is not None:
                to_give = min(current.quantity, stack_size)
                try:
                    current = self._give(owner, inventory, current, definition, to_give)
                except CapacityExceeded:
                    logger.warning(
                        "Bags full withdrawing item %d for %s after %d unit(s)",
                        item_id, owner, sum(stacks),
                    )
                    blocked = True
                    break
                stacks.append(to_give)

            return WithdrawResult(
                item_id=item_id,
                item_name=definition.name,
                granted=sum(stacks),
                remaining=current.quantity if current else 0,
                stacks=tuple(stacks),
                blocked=blocked,
            )

    # --- Sweeps ---------------------------------------------------------------

    def withdraw_category(
        self, owner: OwnerKey, inventory: ReceivingInventory, category: Category
    ) -> CategoryWithdrawResult:
        """Withdraw everything stored in one category.

        A full bag or a missing definition stops only the affected item.
        """
        with self._exclusive(owner, inventory):
            entries = sorted(
                self._ledger_repo.scan_by_category(owner, category),
                key=lambda e: e.item_id,
            )
            results: list[WithdrawResult] = []
            missing: list[int] = []
            for entry in entries:
                try:
                    results.append(self.withdraw_all_of_item(owner, inventory, entry.item_id))
                except ItemDefinitionMissing:
                    logger.warning(
                        "Item %d stored for %s has no definition; skipped",
                        entry.item_id, owner,
                    )
                    missing.append(entry.item_id)
            return CategoryWithdrawResult(
                category=category,
                results=tuple(results),
                missing_definitions=tuple(missing),
            )

    def withdraw_everything(
        self, owner: OwnerKey, inventory: ReceivingInventory
    ) -> list[CategoryWithdrawResult]:
        """Withdraw every category in menu order, continuing past failures."""
        with self._exclusive(owner, inventory):
            return [self.withdraw_category(owner, inventory, c) for c in MENU_ORDER]

    # --- Internal helpers -----------------------------------------------------

    @contextmanager
    def _exclusive(self, owner: OwnerKey, inventory: ReceivingInventory) -> Iterator[None]:
        with self._locks.hold(owner), self._ledger_repo.exclusive():
            with inventory.exclusive():
                yield

    def _definition(self, item_id: int) -> ItemDefinition:
        definition = self._catalog.lookup(item_id)
        if definition is None:
            raise ItemDefinitionMissing(item_id)
        return definition

    def _give(
        self,
        owner: OwnerKey,
        inventory: ReceivingInventory,
        entry: LedgerEntry,
        definition: ItemDefinition,
        amount: int,
    ) -> LedgerEntry | None:
        """Grant ``amount`` of an entry and return what stays in the ledger."""
        if not inventory.check_capacity(entry.item_id, amount, _stack_size(definition)):
            raise CapacityExceeded(entry.item_id, amount, definition.name)

        after = entry.with_quantity(entry.quantity - amount)
        if after is None:
            self._ledger_repo.delete(owner, entry.item_id)
        else:
            self._ledger_repo.upsert(after)

        try:
            inventory.grant(entry.item_id, amount, _stack_size(definition))
        except Exception:
            logger.exception(
                "Granting %d x item %d to %s failed; restoring ledger quantity %d",
                amount, entry.item_id, owner, entry.quantity,
            )
            self._ledger_repo.upsert(entry)
            raise

        logger.info(
            "Withdrew %d x item %d for %s (%d left)",
            amount, entry.item_id, owner, after.quantity if after else 0,
        )
        return after


def _stack_size(definition: ItemDefinition) -> int:
    return max(1, definition.max_stack_size)
