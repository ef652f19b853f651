"""Abstract repository for reagent ledger entries.

Defined in the domain layer so the transfer engine never depends on
infrastructure. Concrete implementations (JSON file, in-memory) live in
the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.ledger import LedgerEntry, OwnerKey


class LedgerRepository(ABC):

    @abstractmethod
    def get(self, owner: OwnerKey, item_id: int) -> LedgerEntry | None:
        """Return the stored entry for an item, or None."""

    @abstractmethod
    def upsert(self, entry: LedgerEntry) -> None:
        """Store ``entry``, replacing any previous entry for the same item.

        Not additive: the entry carries the final total.
        """

    @abstractmethod
    def upsert_many(self, entries: Iterable[LedgerEntry]) -> None:
        """Store several entries as one atomic unit: all of them or none."""

    @abstractmethod
    def delete(self, owner: OwnerKey, item_id: int) -> None:
        """Remove the entry for an item. No-op if absent."""

    @abstractmethod
    def scan_by_category(self, owner: OwnerKey, category: Category) -> list[LedgerEntry]:
        """Return every entry of one category. Order is unspecified."""

    @abstractmethod
    def scan_all(self, owner: OwnerKey) -> list[LedgerEntry]:
        """Return every entry of the owner. Order is unspecified."""

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Keep other writers out of the store for the duration of the block.

        Stores shared with other processes override this; the default
        does nothing.
        """
        yield
