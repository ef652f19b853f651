"""Per-owner sequential lanes for asynchronous bank work.

Tasks submitted for one owner run one at a time, in submission order.
Tasks for different owners run concurrently on a shared thread pool.
A submitted task always runs to completion, even if the session that
asked for it has gone away. Once the lanes are shut down, or the
executor refuses work, submit raises and leaves no lane half-started.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, TypeVar

from reagent_bank.domain.model.ledger import OwnerKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

_Task = tuple[Future, Callable[..., Any], tuple, dict]


class OwnerLanes:

    def __init__(self, max_workers: int = 4, executor: Executor | None = None) -> None:
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="reagent-lane"
        )
        self._guard = threading.Lock()
        # An owner has a queue exactly while its lane is draining.
        self._queues: dict[OwnerKey, deque[_Task]] = {}
        self._closed = False

    def submit(self, owner: OwnerKey, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        future: Future[T] = Future()
        with self._guard:
            if self._closed:
                raise RuntimeError("Owner lanes have been shut down")
            queue = self._queues.get(owner)
            start = queue is None
            if queue is None:
                queue = deque()
                self._queues[owner] = queue
            queue.append((future, fn, args, kwargs))
        if start:
            logger.debug("Starting lane for %s", owner)
            try:
                self._executor.submit(self._drain, owner)
            except BaseException as exc:
                self._abandon(owner, exc)
                raise
        return future

    def _abandon(self, owner: OwnerKey, exc: BaseException) -> None:
        """Fail everything queued behind a lane that never started."""
        with self._guard:
            queue = self._queues.pop(owner, deque())
        logger.warning("Could not start lane for %s: %s", owner, exc)
        for future, *_ in queue:
            if future.set_running_or_notify_cancel():
                future.set_exception(exc)

    def _drain(self, owner: OwnerKey) -> None:
        while True:
            with self._guard:
                queue = self._queues[owner]
                if not queue:
                    del self._queues[owner]
                    logger.debug("Lane for %s drained", owner)
                    return
                future, fn, args, kwargs = queue.popleft()

            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                logger.debug("Lane task for %s failed: %s", owner, exc)
                future.set_exception(exc)
            else:
                future.set_result(result)

    def shutdown(self, wait: bool = True) -> None:
        with self._guard:
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)


def completed(value: T = None) -> Future[T]:
    """A future that is already resolved, for work done synchronously."""
    future: Future[T] = Future()
    future.set_result(value)
    return future
