"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON adapters but
keep everything in dicts and lists. No file I/O, no side effects.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager

from reagent_bank.domain.exceptions import SessionClosedError
from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.item import CarriedStack, GrantedStack, ItemDefinition
from reagent_bank.domain.model.ledger import LedgerEntry, OwnerKey
from reagent_bank.domain.model.menu import MenuOption
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.domain.port.session_gateway import SessionGateway
from reagent_bank.domain.repository.item_catalog import ItemCatalog
from reagent_bank.domain.repository.ledger_repository import LedgerRepository

LINEN = ItemDefinition(2589, "Linen Cloth", 7, 5, 20)
WOOL = ItemDefinition(2592, "Wool Cloth", 7, 5, 20)
COPPER_ORE = ItemDefinition(2770, "Copper Ore", 7, 7, 20)
ELEMENTAL_FIRE = ItemDefinition(7068, "Elemental Fire", 7, 10, 10)
PEACEBLOOM = ItemDefinition(2447, "Peacebloom", 7, 9, 20)
TIGERSEYE = ItemDefinition(818, "Tigerseye", 3, 7, 20, quality=2)
MOSS_AGATE = ItemDefinition(1206, "Moss Agate", 3, 0, 20, quality=2)
HEARTHSTONE = ItemDefinition(6948, "Hearthstone", 15, 0, 1)
SMITH_HAMMER = ItemDefinition(5956, "Blacksmith Hammer", 7, 11, 1)

ALL_ITEMS = [
    LINEN, WOOL, COPPER_ORE, ELEMENTAL_FIRE, PEACEBLOOM,
    TIGERSEYE, MOSS_AGATE, HEARTHSTONE, SMITH_HAMMER,
]

OWNER = OwnerKey(account_key=0, individual_key=101)
OTHER_OWNER = OwnerKey(account_key=0, individual_key=202)


class FakeLedgerRepository(LedgerRepository):

    def __init__(self, entries: list[LedgerEntry] | None = None) -> None:
        self._store: dict[tuple[OwnerKey, int], LedgerEntry] = {}
        self._lock = threading.Lock()
        self.writes = 0
        self.fail_next_batch = False
        self.exclusive_depth = 0
        self.writes_outside_exclusive = 0
        for entry in entries or []:
            self._store[(entry.owner, entry.item_id)] = entry

    def get(self, owner: OwnerKey, item_id: int) -> LedgerEntry | None:
        with self._lock:
            return self._store.get((owner, item_id))

    def upsert(self, entry: LedgerEntry) -> None:
        self.upsert_many([entry])

    def upsert_many(self, entries: Iterable[LedgerEntry]) -> None:
        entries = list(entries)
        with self._lock:
            if self.fail_next_batch:
                self.fail_next_batch = False
                raise OSError("ledger store unavailable")
            for entry in entries:
                self._store[(entry.owner, entry.item_id)] = entry
            self.writes += 1
            self._note_write()

    def delete(self, owner: OwnerKey, item_id: int) -> None:
        with self._lock:
            self._store.pop((owner, item_id), None)
            self.writes += 1
            self._note_write()

    def scan_by_category(self, owner: OwnerKey, category: Category) -> list[LedgerEntry]:
        return [e for e in self.scan_all(owner) if e.category == category]

    def scan_all(self, owner: OwnerKey) -> list[LedgerEntry]:
        with self._lock:
            return [e for (o, _), e in self._store.items() if o == owner]

    def quantity(self, owner: OwnerKey, item_id: int) -> int:
        entry = self.get(owner, item_id)
        return entry.quantity if entry else 0

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        self.exclusive_depth += 1
        try:
            yield
        finally:
            self.exclusive_depth -= 1

    def _note_write(self) -> None:
        if not self.exclusive_depth:
            self.writes_outside_exclusive += 1


class FakeItemCatalog(ItemCatalog):

    def __init__(self, items: list[ItemDefinition] | None = None) -> None:
        self._store = {d.item_id: d for d in (ALL_ITEMS if items is None else items)}
        self.lookups = 0

    def lookup(self, item_id: int) -> ItemDefinition | None:
        self.lookups += 1
        return self._store.get(item_id)


class FakeInventory(ReceivingInventory):
    """Bags with a fixed number of slots; every stack takes one slot.

    ``capacity_stacks`` limits how many more grants will fit, regardless
    of size, which makes "k stacks then full" scenarios easy to set up.
    """

    def __init__(
        self,
        stacks: list[CarriedStack] | None = None,
        capacity_stacks: int | None = None,
    ) -> None:
        self._carried = {(s.container, s.slot): s for s in stacks or []}
        self.capacity_stacks = capacity_stacks
        self.granted: list[tuple[int, int]] = []
        self.removed: list[tuple[int, int]] = []
        self.fail_removal_at: tuple[int, int] | None = None
        self.fail_grant = False
        self.exclusive_depth = 0
        self.changes_outside_exclusive = 0

    def carried_stacks(self) -> list[CarriedStack]:
        return sorted(self._carried.values(), key=lambda s: (s.container, s.slot))

    def check_capacity(self, item_id: int, quantity: int, max_stack_size: int) -> bool:
        if self.capacity_stacks is None:
            return True
        return self.capacity_stacks >= -(-quantity // max_stack_size)

    def grant(self, item_id: int, quantity: int, max_stack_size: int) -> GrantedStack:
        if self.fail_grant:
            raise OSError("inventory update failed")
        if self.capacity_stacks is not None:
            self.capacity_stacks -= -(-quantity // max_stack_size)
        self.granted.append((item_id, quantity))
        self._note_change()
        return GrantedStack(item_id, quantity, 0, len(self.granted))

    def remove_carried(self, container: int, slot: int) -> None:
        if self.fail_removal_at == (container, slot):
            raise OSError(f"cannot remove bag {container} slot {slot}")
        del self._carried[(container, slot)]
        self.removed.append((container, slot))
        self._note_change()

    def total_granted(self, item_id: int) -> int:
        return sum(q for i, q in self.granted if i == item_id)

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        self.exclusive_depth += 1
        try:
            yield
        finally:
            self.exclusive_depth -= 1

    def _note_change(self) -> None:
        if not self.exclusive_depth:
            self.changes_outside_exclusive += 1


class FakeSessionGateway(SessionGateway):

    def __init__(self) -> None:
        self.menus: list[list[MenuOption]] = []
        self.messages: list[str] = []
        self.closed = 0
        self.connected = True

    def render_menu(self, options: Sequence[MenuOption]) -> None:
        self._check()
        self.menus.append(list(options))

    def report_message(self, text: str) -> None:
        self._check()
        self.messages.append(text)

    def close_menu(self) -> None:
        self._check()
        self.closed += 1

    @property
    def last_menu(self) -> list[MenuOption]:
        return self.menus[-1]

    def labels(self) -> list[str]:
        return [option.label for option in self.last_menu]

    def option(self, label_prefix: str) -> MenuOption:
        for option in self.last_menu:
            if option.label.startswith(label_prefix):
                return option
        raise AssertionError(f"No option starting with {label_prefix!r} in {self.labels()}")

    def _check(self) -> None:
        if not self.connected:
            raise SessionClosedError("user logged out")


def stack(item: ItemDefinition, count: int, slot: int, container: int = 0) -> CarriedStack:
    return CarriedStack(item.item_id, count, container, slot)


def entry(item: ItemDefinition, quantity: int, owner: OwnerKey = OWNER) -> LedgerEntry:
    return LedgerEntry(owner, item.item_id, item.category, quantity)
