"""Per-owner mutual exclusion for ledger read-modify-write sequences."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from reagent_bank.domain.model.ledger import OwnerKey

logger = logging.getLogger(__name__)


class OwnerLocks:
    """One re-entrant lock per owner key.

    Operations on different owners never contend. Locks are created on
    first use and kept for the life of the registry, so the registry grows
    with the number of distinct owners served.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[OwnerKey, threading.RLock] = {}

    def for_owner(self, owner: OwnerKey) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(owner)
            if lock is None:
                lock = threading.RLock()
                self._locks[owner] = lock
            return lock

    @contextmanager
    def hold(self, owner: OwnerKey) -> Iterator[None]:
        lock = self.for_owner(owner)
        with lock:
            logger.debug("Holding ledger lock for %s", owner)
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
