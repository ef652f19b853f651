"""Application service: Withdraw Reagents use cases.

Turns transfer outcomes into the messages shown to the user. Expected
failures (full bags, unknown items) become messages here; nothing in this
module lets them escape to the caller.
"""

from __future__ import annotations

from collections.abc import Callable

from reagent_bank.application.dto import TransferReport
from reagent_bank.domain.exceptions import CapacityExceeded, ItemDefinitionMissing
from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.model.transfer import CategoryWithdrawResult, WithdrawResult
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.domain.service.transfer_service import TransferService


class WithdrawReagentsHandler:

    def __init__(self, transfer: TransferService) -> None:
        self._transfer = transfer

    def withdraw_one(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> TransferReport:
        return self._single(self._transfer.withdraw_one, owner, inventory, item_id)

    def withdraw_stack(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> TransferReport:
        return self._single(self._transfer.withdraw_stack, owner, inventory, item_id)

    def withdraw_all_of_item(
        self, owner: OwnerKey, inventory: ReceivingInventory, item_id: int
    ) -> TransferReport:
        report = TransferReport()
        try:
            result = self._transfer.withdraw_all_of_item(owner, inventory, item_id)
        except ItemDefinitionMissing as exc:
            report.add(str(exc))
            return report
        self._describe(result, report)
        return report

    def withdraw_category(
        self, owner: OwnerKey, inventory: ReceivingInventory, category: Category
    ) -> TransferReport:
        report = TransferReport()
        outcome = self._transfer.withdraw_category(owner, inventory, category)
        if outcome.is_empty:
            report.add("No reagents to withdraw in this category.")
            return report
        self._describe_category(outcome, report)
        if not outcome.granted_any:
            report.add("No reagents withdrawn.")
        return report

    def withdraw_everything(
        self, owner: OwnerKey, inventory: ReceivingInventory
    ) -> TransferReport:
        report = TransferReport()
        outcomes = self._transfer.withdraw_everything(owner, inventory)
        if all(outcome.is_empty for outcome in outcomes):
            report.add("No reagents to withdraw.")
            return report
        for outcome in outcomes:
            self._describe_category(outcome, report)
        if not any(outcome.granted_any for outcome in outcomes):
            report.add("No reagents withdrawn.")
        return report

    # --- Formatting -----------------------------------------------------------

    @staticmethod
    def _single(
        operation: Callable[[OwnerKey, ReceivingInventory, int], WithdrawResult],
        owner: OwnerKey,
        inventory: ReceivingInventory,
        item_id: int,
    ) -> TransferReport:
        report = TransferReport()
        try:
            result = operation(owner, inventory, item_id)
        except (CapacityExceeded, ItemDefinitionMissing) as exc:
            report.add(str(exc))
            return report
        if result.is_empty:
            report.add(f"No {result.item_name} stored.")
            return report
        report.add(f"Withdrew {result.granted} x {result.item_name}.")
        report.moved = result.granted
        return report

    @staticmethod
    def _describe(result: WithdrawResult, report: TransferReport) -> None:
        if result.is_empty:
            report.add(f"No {result.item_name} stored.")
            return
        if result.blocked:
            report.add(
                f"Bag full after withdrawing {result.granted} x {result.item_name} "
                f"(remaining {result.remaining})."
            )
        if result.granted > 0:
            report.add(f"Withdrew {result.granted} x {result.item_name}.")
            report.moved += result.granted

    @classmethod
    def _describe_category(cls, outcome: CategoryWithdrawResult, report: TransferReport) -> None:
        for result in outcome.results:
            cls._describe(result, report)
        for item_id in outcome.missing_definitions:
            report.add(str(ItemDefinitionMissing(item_id)))
