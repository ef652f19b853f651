"""Application service: the reagent bank menu.

Drives a user's NavigationState from menu selections. Category listings
and deposits are asynchronous: they run on the owner's lane and the
returned Future resolves once the menu has been rendered or the outcome
reported. Single-item withdrawals run on the caller's thread; the
transfer service's owner lock serializes them against in-flight work.

Ledger writes always complete before anything is sent to the session.
If the session has closed in the meantime, the report is dropped and
the ledger keeps the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future

from reagent_bank.application.browse_category import BrowseCategoryHandler
from reagent_bank.application.deposit_reagents import DepositReagentsHandler
from reagent_bank.application.dto import TransferReport
from reagent_bank.application.owner_lanes import OwnerLanes, completed
from reagent_bank.application.session import BankSession
from reagent_bank.application.show_item import ShowItemHandler
from reagent_bank.application.withdraw_reagents import WithdrawReagentsHandler
from reagent_bank.domain.exceptions import ItemDefinitionMissing, SessionClosedError
from reagent_bank.domain.model.category import MENU_ORDER, Category
from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.model.menu import MenuAction, MenuOption
from reagent_bank.domain.model.navigation import CategoryView, ItemSubmenu
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory

logger = logging.getLogger(__name__)


class BankMenu:

    def __init__(
        self,
        browse: BrowseCategoryHandler,
        show_item: ShowItemHandler,
        deposit: DepositReagentsHandler,
        withdraw: WithdrawReagentsHandler,
        lanes: OwnerLanes,
    ) -> None:
        self._browse = browse
        self._show_item = show_item
        self._deposit = deposit
        self._withdraw = withdraw
        self._lanes = lanes

    # --- Entry points ---------------------------------------------------------

    def hello(self, session: BankSession) -> None:
        """Show the main menu."""
        session.navigation.show_main_menu()
        options = [
            MenuOption("Deposit All Reagents", MenuAction.DEPOSIT_ALL),
            MenuOption("Withdraw All Reagents", MenuAction.WITHDRAW_ALL),
        ]
        options.extend(
            MenuOption(category.label, MenuAction.SHOW_CATEGORY, category=category)
            for category in MENU_ORDER
        )
        self._render(session, options)

    def select(self, session: BankSession, option: MenuOption) -> Future[None]:
        """Act on a selected option.

        The returned future resolves when the resulting menu or report has
        been delivered.
        """
        action = option.action
        logger.debug("%s selected %s", session.owner, option)

        if action == MenuAction.MAIN_MENU:
            self.hello(session)
            return completed()

        if action == MenuAction.SHOW_CATEGORY:
            if option.category is None:
                self.hello(session)
                return completed()
            return self._show_category(session, option.category, option.page)

        if action == MenuAction.SHOW_ITEM:
            if option.item_id is None:
                self.hello(session)
                return completed()
            self._open_item(session, option.item_id, option.category, option.page)
            return completed()

        if action == MenuAction.DEPOSIT_ALL:
            return self._lanes.submit(
                session.owner, self._run_deposit, session, option.category
            )

        if action == MenuAction.WITHDRAW_ALL:
            if option.category is None:
                report = self._withdraw.withdraw_everything(session.owner, session.inventory)
            else:
                report = self._withdraw.withdraw_category(
                    session.owner, session.inventory, option.category
                )
            self._report(session, report)
            self._close(session)
            return completed()

        if action in _ITEM_ACTIONS:
            return self._item_action(session, option)

        return self._rerender(session)

    # --- Views ----------------------------------------------------------------

    def _show_category(self, session: BankSession, category: Category, page: int) -> Future[None]:
        return self._lanes.submit(
            session.owner, self._render_category, session, category, page
        )

    def _render_category(self, session: BankSession, category: Category, page: int) -> None:
        dto = self._browse.handle(session.owner, category, page, session.locale)
        session.navigation.show_category(category, dto.page_index)

        options = [
            MenuOption(
                f"{dto.label}: {dto.total_types} types, {dto.total_quantity} total",
                MenuAction.NOOP,
            ),
            MenuOption("Deposit All", MenuAction.DEPOSIT_ALL, category=category),
            MenuOption("Withdraw All", MenuAction.WITHDRAW_ALL, category=category),
        ]
        if dto.has_next:
            options.append(
                MenuOption(
                    f"Next Page ▶ ({dto.page_index + 2}/{dto.total_pages})",
                    MenuAction.SHOW_CATEGORY,
                    category=category,
                    page=dto.page_index + 1,
                )
            )
        if dto.has_previous:
            options.append(
                MenuOption(
                    f"◀ Previous Page ({dto.page_index}/{dto.total_pages})",
                    MenuAction.SHOW_CATEGORY,
                    category=category,
                    page=dto.page_index - 1,
                )
            )
        for line in dto.lines:
            options.append(
                MenuOption(
                    f"[{line.name}] x {line.quantity}",
                    MenuAction.SHOW_ITEM,
                    category=category,
                    page=dto.page_index,
                    item_id=line.item_id,
                    quality=line.quality,
                )
            )
        options.append(MenuOption("Back to Categories", MenuAction.MAIN_MENU))
        self._render(session, options)

    def _open_item(
        self,
        session: BankSession,
        item_id: int,
        category: Category | None,
        page: int,
    ) -> None:
        try:
            detail = self._show_item.handle(session.owner, item_id, session.locale)
        except ItemDefinitionMissing as exc:
            logger.warning("Cannot open item %d for %s: %s", item_id, session.owner, exc)
            self._report_text(session, str(exc))
            self.hello(session)
            return

        if category is None and detail.category:
            category = Category(detail.category)
        submenu = session.navigation.open_item(item_id, category, page)

        options = [
            MenuOption(
                f"[{detail.name}] Stored: {detail.stored}",
                MenuAction.NOOP,
                quality=detail.quality,
            ),
        ]
        if detail.stored > 0:
            options.append(MenuOption("Withdraw 1", MenuAction.WITHDRAW_ONE, item_id=item_id))
        if detail.stored > 1 and detail.max_stack_size > 1:
            options.append(
                MenuOption("Withdraw Stack", MenuAction.WITHDRAW_STACK, item_id=item_id)
            )
        if detail.stored > 0:
            options.append(
                MenuOption("Withdraw All", MenuAction.WITHDRAW_ITEM_ALL, item_id=item_id)
            )
        if submenu.return_category is not None:
            options.append(
                MenuOption(
                    "Back",
                    MenuAction.SHOW_CATEGORY,
                    category=submenu.return_category,
                    page=submenu.return_page,
                )
            )
        else:
            options.append(MenuOption("Back", MenuAction.MAIN_MENU))
        self._render(session, options)

    def _rerender(self, session: BankSession) -> Future[None]:
        view = session.navigation.view
        if isinstance(view, CategoryView):
            return self._show_category(session, view.category, view.page)
        if isinstance(view, ItemSubmenu):
            self._open_item(session, view.item_id, view.return_category, view.return_page)
            return completed()
        self.hello(session)
        return completed()

    # --- Transfers ------------------------------------------------------------

    def _run_deposit(self, session: BankSession, category: Category | None) -> None:
        report = self._deposit.handle(
            session.owner, session.inventory, category, session.locale
        )
        self._report(session, report)
        self._close(session)

    def _item_action(self, session: BankSession, option: MenuOption) -> Future[None]:
        item_id = option.item_id
        if item_id is None:
            self.hello(session)
            return completed()

        view = session.navigation.view
        if not (isinstance(view, ItemSubmenu) and view.item_id == item_id):
            session.navigation.open_item(item_id)

        operation: Callable[[OwnerKey, ReceivingInventory, int], TransferReport] = {
            MenuAction.WITHDRAW_ONE: self._withdraw.withdraw_one,
            MenuAction.WITHDRAW_STACK: self._withdraw.withdraw_stack,
            MenuAction.WITHDRAW_ITEM_ALL: self._withdraw.withdraw_all_of_item,
        }[option.action]
        self._report(session, operation(session.owner, session.inventory, item_id))

        target = session.navigation.return_target()
        if isinstance(target, CategoryView):
            return self._show_category(session, target.category, target.page)
        self.hello(session)
        return completed()

    # --- Gateway delivery -----------------------------------------------------

    def _render(self, session: BankSession, options: list[MenuOption]) -> None:
        self._deliver(session, "menu", lambda: session.gateway.render_menu(options))

    def _report(self, session: BankSession, report: TransferReport) -> None:
        for message in report.messages:
            self._report_text(session, message)

    def _report_text(self, session: BankSession, text: str) -> None:
        self._deliver(session, "message", lambda: session.gateway.report_message(text))

    def _close(self, session: BankSession) -> None:
        self._deliver(session, "close", session.gateway.close_menu)

    @staticmethod
    def _deliver(session: BankSession, what: str, send: Callable[[], None]) -> None:
        try:
            send()
        except SessionClosedError:
            logger.warning("Session for %s closed; %s not delivered", session.owner, what)


_ITEM_ACTIONS = (
    MenuAction.WITHDRAW_ONE,
    MenuAction.WITHDRAW_STACK,
    MenuAction.WITHDRAW_ITEM_ALL,
)
