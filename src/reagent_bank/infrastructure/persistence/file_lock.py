"""Exclusive file locks shared by threads and by separate processes.

Every ``reagent-bank`` command is its own process, so a thread lock alone
cannot serialize writers of the same data file. A FileLock takes an
exclusive POSIX ``fcntl.flock`` on a sidecar ``<name>.lock`` file.

``flock`` locks belong to an open file, so two handles in one process
would block each other. ``file_lock(path)`` therefore hands out one
shared instance per path, and that instance is re-entrant for the thread
holding it.
"""

from __future__ import annotations

import fcntl
import logging
import threading
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)

_registry: dict[Path, FileLock] = {}
_registry_guard = threading.Lock()


class FileLock:

    def __init__(self, lock_path: Path) -> None:
        self._lock_path = lock_path
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._handle: IO[bytes] | None = None

    @property
    def path(self) -> Path:
        return self._lock_path

    def acquire(self) -> None:
        self._thread_lock.acquire()
        if self._depth == 0:
            try:
                self._lock_path.parent.mkdir(parents=True, exist_ok=True)
                handle = self._lock_path.open("a+b")
                try:
                    fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
                except BaseException:
                    handle.close()
                    raise
            except BaseException:
                self._thread_lock.release()
                raise
            self._handle = handle
            logger.debug("Acquired %s", self._lock_path)
        self._depth += 1

    def release(self) -> None:
        self._depth -= 1
        if self._depth == 0:
            handle, self._handle = self._handle, None
            try:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
            finally:
                handle.close()
            logger.debug("Released %s", self._lock_path)
        self._thread_lock.release()

    def __enter__(self) -> FileLock:
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


def file_lock(data_path: Path) -> FileLock:
    """The process-wide lock guarding ``data_path``."""
    lock_path = data_path.with_name(data_path.name + ".lock").resolve()
    with _registry_guard:
        lock = _registry.get(lock_path)
        if lock is None:
            lock = FileLock(lock_path)
            _registry[lock_path] = lock
        return lock
