"""Integration tests for the BankMenu navigation flow."""

import pytest

from reagent_bank.application.bank_menu import BankMenu
from reagent_bank.application.browse_category import BrowseCategoryHandler
from reagent_bank.application.deposit_reagents import DepositReagentsHandler
from reagent_bank.application.owner_lanes import OwnerLanes
from reagent_bank.application.session import BankSession
from reagent_bank.application.show_item import ShowItemHandler
from reagent_bank.application.withdraw_reagents import WithdrawReagentsHandler
from reagent_bank.domain.model.category import MENU_ORDER, Category
from reagent_bank.domain.model.item import ItemDefinition
from reagent_bank.domain.model.menu import MenuAction, MenuOption
from reagent_bank.domain.model.navigation import CategoryView, ItemSubmenu, MainMenu
from reagent_bank.domain.service.transfer_service import TransferService
from tests.fakes import (
    ALL_ITEMS,
    COPPER_ORE,
    LINEN,
    OWNER,
    WOOL,
    FakeInventory,
    FakeItemCatalog,
    FakeLedgerRepository,
    FakeSessionGateway,
    entry,
    stack,
)

TIMEOUT = 5


@pytest.fixture
def lanes():
    lanes = OwnerLanes(max_workers=2)
    yield lanes
    lanes.shutdown()


def _menu(lanes, entries=(), items=None, page_size=10):
    repo = FakeLedgerRepository(list(entries))
    catalog = FakeItemCatalog(items)
    transfer = TransferService(repo, catalog)
    menu = BankMenu(
        browse=BrowseCategoryHandler(repo, catalog, page_size),
        show_item=ShowItemHandler(repo, catalog),
        deposit=DepositReagentsHandler(transfer, catalog),
        withdraw=WithdrawReagentsHandler(transfer),
        lanes=lanes,
    )
    return menu, repo


def _session(stacks=None):
    return BankSession(owner=OWNER, inventory=FakeInventory(stacks), gateway=FakeSessionGateway())


def _choose(menu, session, label_prefix):
    option = session.gateway.option(label_prefix)
    menu.select(session, option).result(timeout=TIMEOUT)


class TestMainMenu:

    def test_hello_lists_bulk_actions_then_categories(self, lanes):
        menu, _ = _menu(lanes)
        session = _session()

        menu.hello(session)

        labels = session.gateway.labels()
        assert labels[:2] == ["Deposit All Reagents", "Withdraw All Reagents"]
        assert labels[2:] == [c.label for c in MENU_ORDER]
        assert session.navigation.view == MainMenu()

    def test_deposit_all_reports_and_closes(self, lanes):
        menu, repo = _menu(lanes)
        session = _session([stack(LINEN, 20, 0), stack(COPPER_ORE, 4, 1)])
        menu.hello(session)

        _choose(menu, session, "Deposit All Reagents")

        assert session.gateway.messages == [
            "The following was deposited:",
            "20 Linen Cloth",
            "4 Copper Ore",
        ]
        assert session.gateway.closed == 1
        assert repo.quantity(OWNER, LINEN.item_id) == 20

    def test_withdraw_all_reports_and_closes(self, lanes):
        menu, repo = _menu(lanes, [entry(LINEN, 5)])
        session = _session()
        menu.hello(session)

        _choose(menu, session, "Withdraw All Reagents")

        assert session.gateway.messages == ["Withdrew 5 x Linen Cloth."]
        assert session.gateway.closed == 1
        assert repo.scan_all(OWNER) == []


class TestCategoryPage:

    def test_layout(self, lanes):
        menu, _ = _menu(lanes, [entry(WOOL, 3), entry(LINEN, 40)])
        session = _session()
        menu.hello(session)

        _choose(menu, session, "Cloth")

        assert session.gateway.labels() == [
            "Cloth: 2 types, 43 total",
            "Deposit All",
            "Withdraw All",
            "[Linen Cloth] x 40",
            "[Wool Cloth] x 3",
            "Back to Categories",
        ]
        assert session.navigation.view == CategoryView(Category.CLOTH, 0)

    def test_next_and_previous_pages(self, lanes):
        cloths = [ItemDefinition(90000 + i, f"Cloth {i}", 7, 5, 20) for i in range(5)]
        menu, _ = _menu(lanes, [entry(c, 1) for c in cloths], items=cloths, page_size=2)
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")

        assert "Next Page ▶ (2/3)" in session.gateway.labels()
        assert not any(label.startswith("◀") for label in session.gateway.labels())

        _choose(menu, session, "Next Page")

        labels = session.gateway.labels()
        assert "Next Page ▶ (3/3)" in labels
        assert "◀ Previous Page (1/3)" in labels
        assert "[Cloth 2] x 1" in labels
        assert session.navigation.view == CategoryView(Category.CLOTH, 1)

        _choose(menu, session, "◀ Previous Page")
        assert session.navigation.view == CategoryView(Category.CLOTH, 0)

    def test_category_deposit_closes_menu(self, lanes):
        menu, repo = _menu(lanes)
        session = _session([stack(LINEN, 20, 0), stack(COPPER_ORE, 4, 1)])
        menu.hello(session)
        _choose(menu, session, "Cloth")

        _choose(menu, session, "Deposit All")

        assert session.gateway.messages == ["The following was deposited:", "20 Linen Cloth"]
        assert session.gateway.closed == 1
        assert repo.quantity(OWNER, COPPER_ORE.item_id) == 0

    def test_category_withdraw(self, lanes):
        menu, repo = _menu(lanes, [entry(LINEN, 5), entry(COPPER_ORE, 2)])
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")

        _choose(menu, session, "Withdraw All")

        assert session.gateway.messages == ["Withdrew 5 x Linen Cloth."]
        assert repo.quantity(OWNER, COPPER_ORE.item_id) == 2

    def test_header_rerenders_current_page(self, lanes):
        menu, _ = _menu(lanes, [entry(LINEN, 5)])
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")
        rendered = len(session.gateway.menus)

        _choose(menu, session, "Cloth:")

        assert len(session.gateway.menus) == rendered + 1
        assert session.gateway.labels()[0] == "Cloth: 1 types, 5 total"

    def test_back_to_categories(self, lanes):
        menu, _ = _menu(lanes, [entry(LINEN, 5)])
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")

        _choose(menu, session, "Back to Categories")

        assert session.gateway.labels()[0] == "Deposit All Reagents"
        assert session.navigation.view == MainMenu()


class TestItemSubmenu:

    def _open_linen(self, lanes, quantity):
        menu, repo = _menu(lanes, [entry(LINEN, quantity)])
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")
        _choose(menu, session, "[Linen Cloth]")
        return menu, repo, session

    def test_layout(self, lanes):
        _, _, session = self._open_linen(lanes, 45)

        assert session.gateway.labels() == [
            "[Linen Cloth] Stored: 45",
            "Withdraw 1",
            "Withdraw Stack",
            "Withdraw All",
            "Back",
        ]
        assert session.navigation.view == ItemSubmenu(LINEN.item_id, Category.CLOTH, 0)

    def test_single_unit_has_no_stack_option(self, lanes):
        _, _, session = self._open_linen(lanes, 1)
        assert "Withdraw Stack" not in session.gateway.labels()

    def test_withdraw_returns_to_category_page(self, lanes):
        menu, repo, session = self._open_linen(lanes, 45)

        _choose(menu, session, "Withdraw Stack")

        assert session.gateway.messages == ["Withdrew 20 x Linen Cloth."]
        assert repo.quantity(OWNER, LINEN.item_id) == 25
        assert session.gateway.labels()[0] == "Cloth: 1 types, 25 total"
        assert session.navigation.view == CategoryView(Category.CLOTH, 0)

    def test_withdraw_with_full_bags(self, lanes):
        menu, repo, session = self._open_linen(lanes, 45)
        session.inventory.capacity_stacks = 0

        _choose(menu, session, "Withdraw 1")

        assert session.gateway.messages == ["Not enough bag space to withdraw 1 x Linen Cloth."]
        assert repo.quantity(OWNER, LINEN.item_id) == 45

    def test_back_returns_to_page(self, lanes):
        cloths = [ItemDefinition(90000 + i, f"Cloth {i}", 7, 5, 20) for i in range(3)]
        menu, _ = _menu(lanes, [entry(c, 2) for c in cloths], items=cloths, page_size=2)
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")
        _choose(menu, session, "Next Page")
        _choose(menu, session, "[Cloth 2]")

        _choose(menu, session, "Back")

        assert session.navigation.view == CategoryView(Category.CLOTH, 1)
        assert "[Cloth 2] x 2" in session.gateway.labels()

    def test_withdraw_from_second_page_returns_to_it(self, lanes):
        cloths = [ItemDefinition(90000 + i, f"Cloth {i}", 7, 5, 20) for i in range(3)]
        menu, repo = _menu(lanes, [entry(c, 2) for c in cloths], items=cloths, page_size=2)
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")
        _choose(menu, session, "Next Page")
        _choose(menu, session, "[Cloth 2]")

        _choose(menu, session, "Withdraw 1")

        assert session.gateway.messages == ["Withdrew 1 x Cloth 2."]
        assert repo.quantity(OWNER, 90002) == 1
        assert session.navigation.view == CategoryView(Category.CLOTH, 1)
        labels = session.gateway.labels()
        assert labels[0] == "Cloth: 3 types, 5 total"
        assert "[Cloth 2] x 1" in labels
        assert "◀ Previous Page (1/2)" in labels

    def test_emptying_last_page_lands_on_previous_page(self, lanes):
        cloths = [ItemDefinition(90000 + i, f"Cloth {i}", 7, 5, 20) for i in range(3)]
        menu, repo = _menu(lanes, [entry(c, 1) for c in cloths], items=cloths, page_size=2)
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")
        _choose(menu, session, "Next Page")
        _choose(menu, session, "[Cloth 2]")

        _choose(menu, session, "Withdraw 1")

        assert repo.quantity(OWNER, 90002) == 0
        assert session.navigation.view == CategoryView(Category.CLOTH, 0)
        labels = session.gateway.labels()
        assert labels[0] == "Cloth: 2 types, 2 total"
        assert "[Cloth 0] x 1" in labels
        assert "[Cloth 1] x 1" in labels
        assert not any("Page" in label for label in labels)

    def test_unknown_item_goes_to_main_menu(self, lanes):
        menu, _ = _menu(lanes, items=ALL_ITEMS)
        session = _session()
        menu.hello(session)

        menu.select(session, MenuOption("?", MenuAction.SHOW_ITEM, item_id=424242)).result(timeout=TIMEOUT)

        assert session.gateway.messages == ["Error: Item definition not found for entry 424242."]
        assert session.navigation.view == MainMenu()


class TestClosedSession:

    def test_deposit_completes_after_disconnect(self, lanes):
        menu, repo = _menu(lanes)
        session = _session([stack(LINEN, 20, 0)])
        menu.hello(session)
        option = session.gateway.option("Deposit All Reagents")
        session.gateway.connected = False

        assert menu.select(session, option).result(timeout=TIMEOUT) is None

        assert repo.quantity(OWNER, LINEN.item_id) == 20
        assert session.gateway.messages == []
        assert session.gateway.closed == 0

    def test_category_listing_dropped_after_disconnect(self, lanes):
        menu, _ = _menu(lanes, [entry(LINEN, 5)])
        session = _session()
        menu.hello(session)
        option = session.gateway.option("Cloth")
        session.gateway.connected = False

        menu.select(session, option).result(timeout=TIMEOUT)

        assert len(session.gateway.menus) == 1


class TestItemQuality:

    def test_item_rows_carry_quality(self, lanes):
        runecloth = ItemDefinition(14047, "Runecloth", 7, 5, 20, quality=2)
        menu, _ = _menu(lanes, [entry(LINEN, 3), entry(runecloth, 4)], items=[LINEN, runecloth])
        session = _session()
        menu.hello(session)

        _choose(menu, session, "Cloth")

        assert session.gateway.option("[Linen Cloth]").quality == 1
        assert session.gateway.option("[Runecloth]").quality == 2
        assert session.gateway.option("Cloth:").quality is None
        assert session.gateway.option("Deposit All").quality is None

    def test_submenu_header_carries_quality(self, lanes):
        runecloth = ItemDefinition(14047, "Runecloth", 7, 5, 20, quality=2)
        menu, _ = _menu(lanes, [entry(runecloth, 4)], items=[runecloth])
        session = _session()
        menu.hello(session)
        _choose(menu, session, "Cloth")

        _choose(menu, session, "[Runecloth]")

        assert session.gateway.option("[Runecloth] Stored: 4").quality == 2
        assert session.gateway.option("Withdraw 1").quality is None
