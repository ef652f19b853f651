"""JSON-file-backed implementation of LedgerRepository.

Rows are stored as ``owner_account_key, owner_individual_key, item_id,
category, quantity`` and are unique on the first three. Every mutation
rewrites the file atomically, so a batch of upserts lands as one unit.
Readers and writers in every process serialize on a sidecar
``.lock`` file next to the ledger.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from reagent_bank.domain.model.category import Category
from reagent_bank.domain.model.ledger import LedgerEntry, OwnerKey
from reagent_bank.domain.repository.ledger_repository import LedgerRepository
from reagent_bank.infrastructure.persistence.file_lock import file_lock
from reagent_bank.infrastructure.persistence.json_file import atomic_write_json, load_json

logger = logging.getLogger(__name__)

_RowKey = tuple[int, int, int]


class JsonLedgerRepository(LedgerRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = file_lock(file_path)
        with self._lock:
            self._ensure_file()

    # --- LedgerRepository interface -------------------------------------------

    def get(self, owner: OwnerKey, item_id: int) -> LedgerEntry | None:
        with self._lock:
            raw = self._load_rows().get(_key(owner, item_id))
        return self._to_domain(raw) if raw is not None else None

    def upsert(self, entry: LedgerEntry) -> None:
        self.upsert_many([entry])

    def upsert_many(self, entries: Iterable[LedgerEntry]) -> None:
        entries = list(entries)
        if not entries:
            return
        with self._lock:
            rows = self._load_rows()
            for entry in entries:
                rows[_key(entry.owner, entry.item_id)] = self._to_raw(entry)
            self._persist_rows(rows)
        logger.debug("Upserted %d ledger row(s) in %s", len(entries), self._file_path)

    def delete(self, owner: OwnerKey, item_id: int) -> None:
        with self._lock:
            rows = self._load_rows()
            if rows.pop(_key(owner, item_id), None) is None:
                return
            self._persist_rows(rows)
        logger.debug("Deleted ledger row %s/%d", owner, item_id)

    def scan_by_category(self, owner: OwnerKey, category: Category) -> list[LedgerEntry]:
        return [e for e in self.scan_all(owner) if e.category == category]

    def scan_all(self, owner: OwnerKey) -> list[LedgerEntry]:
        with self._lock:
            rows = self._load_rows()
        return [
            self._to_domain(raw)
            for (account, individual, _), raw in rows.items()
            if (account, individual) == (owner.account_key, owner.individual_key)
        ]

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._lock:
            yield

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: LedgerEntry) -> dict:
        return {
            "owner_account_key": entry.owner.account_key,
            "owner_individual_key": entry.owner.individual_key,
            "item_id": entry.item_id,
            "category": int(entry.category),
            "quantity": entry.quantity,
        }

    @staticmethod
    def _to_domain(raw: dict) -> LedgerEntry:
        return LedgerEntry(
            owner=OwnerKey(raw["owner_account_key"], raw["owner_individual_key"]),
            item_id=raw["item_id"],
            category=Category(raw["category"]),
            quantity=raw["quantity"],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_rows(self) -> dict[_RowKey, dict]:
        rows: dict[_RowKey, dict] = {}
        for raw in load_json(self._file_path, []):
            rows[(raw["owner_account_key"], raw["owner_individual_key"], raw["item_id"])] = raw
        return rows

    def _persist_rows(self, rows: dict[_RowKey, dict]) -> None:
        atomic_write_json(self._file_path, [rows[key] for key in sorted(rows)])

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            atomic_write_json(self._file_path, [])


def _key(owner: OwnerKey, item_id: int) -> _RowKey:
    return (owner.account_key, owner.individual_key, item_id)
