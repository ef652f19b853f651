"""JSON-file-backed character bags implementing ReceivingInventory.

The file holds the slot count of every container (0 is the main pack,
other numbers are equipped bags) and the stacks currently in them:

    {"containers": {"0": 16, "19": 10},
     "stacks": [{"item_id": 2589, "count": 20, "container": 0, "slot": 3}]}

New items top up partial stacks of the same item first, then take free
slots in container order. Every change is written back immediately,
under a sidecar file lock shared with other processes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from reagent_bank.domain.exceptions import EntityNotFoundError, ValidationError
from reagent_bank.domain.model.item import CarriedStack, GrantedStack
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.infrastructure.persistence.file_lock import file_lock
from reagent_bank.infrastructure.persistence.json_file import atomic_write_json, load_json

logger = logging.getLogger(__name__)

DEFAULT_CONTAINERS = {0: 16}


class JsonCharacterInventory(ReceivingInventory):

    def __init__(self, file_path: Path, containers: dict[int, int] | None = None) -> None:
        self._file_path = file_path
        self._lock = file_lock(file_path)
        with self._lock:
            if not file_path.exists():
                self._persist(containers or dict(DEFAULT_CONTAINERS), [])

    # --- ReceivingInventory interface -----------------------------------------

    def carried_stacks(self) -> list[CarriedStack]:
        with self._lock:
            _, stacks = self._load()
        return sorted(stacks, key=lambda s: (s.container, s.slot))

    def check_capacity(self, item_id: int, quantity: int, max_stack_size: int) -> bool:
        with self._lock:
            containers, stacks = self._load()
        return self._room_for(item_id, max_stack_size, containers, stacks) >= quantity

    def grant(self, item_id: int, quantity: int, max_stack_size: int) -> GrantedStack:
        if quantity <= 0:
            raise ValidationError("Grant quantity must be positive")
        with self._lock:
            containers, stacks = self._load()
            if self._room_for(item_id, max_stack_size, containers, stacks) < quantity:
                raise ValidationError(f"No room for {quantity} x item {item_id}")

            first: GrantedStack | None = None
            left = quantity
            placed: list[CarriedStack] = []
            for stack in sorted(stacks, key=lambda s: (s.container, s.slot)):
                if left and stack.item_id == item_id and stack.count < max_stack_size:
                    add = min(left, max_stack_size - stack.count)
                    stack = CarriedStack(item_id, stack.count + add, stack.container, stack.slot)
                    left -= add
                    first = first or GrantedStack(item_id, add, stack.container, stack.slot)
                placed.append(stack)

            for container, slot in self._free_slots(containers, placed):
                if not left:
                    break
                add = min(left, max_stack_size)
                placed.append(CarriedStack(item_id, add, container, slot))
                left -= add
                first = first or GrantedStack(item_id, add, container, slot)

            self._persist(containers, placed)

        logger.debug("Placed %d x item %d in %s", quantity, item_id, self._file_path.name)
        return first

    def remove_carried(self, container: int, slot: int) -> None:
        with self._lock:
            containers, stacks = self._load()
            kept = [s for s in stacks if (s.container, s.slot) != (container, slot)]
            if len(kept) == len(stacks):
                raise EntityNotFoundError(f"No item in bag {container} slot {slot}")
            self._persist(containers, kept)

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self._lock:
            yield

    # --- Helpers used by the CLI ----------------------------------------------

    def add_stack(self, item_id: int, count: int, max_stack_size: int) -> GrantedStack:
        """Put loot into the bags, as if the character had picked it up."""
        return self.grant(item_id, count, max_stack_size)

    # --- Internal helpers -----------------------------------------------------

    def _room_for(
        self,
        item_id: int,
        max_stack_size: int,
        containers: dict[int, int],
        stacks: list[CarriedStack],
    ) -> int:
        top_up = sum(
            max_stack_size - s.count
            for s in stacks
            if s.item_id == item_id and s.count < max_stack_size
        )
        free = sum(1 for _ in self._free_slots(containers, stacks))
        return top_up + free * max_stack_size

    @staticmethod
    def _free_slots(containers: dict[int, int], stacks: list[CarriedStack]):
        taken = {(s.container, s.slot) for s in stacks}
        for container in sorted(containers):
            for slot in range(containers[container]):
                if (container, slot) not in taken:
                    yield container, slot

    def _load(self) -> tuple[dict[int, int], list[CarriedStack]]:
        raw = load_json(self._file_path, {"containers": {}, "stacks": []})
        containers = {int(k): v for k, v in raw.get("containers", {}).items()}
        stacks = [
            CarriedStack(s["item_id"], s["count"], s["container"], s["slot"])
            for s in raw.get("stacks", [])
        ]
        return containers, stacks

    def _persist(self, containers: dict[int, int], stacks: list[CarriedStack]) -> None:
        atomic_write_json(
            self._file_path,
            {
                "containers": {str(k): v for k, v in sorted(containers.items())},
                "stacks": [
                    {
                        "item_id": s.item_id,
                        "count": s.count,
                        "container": s.container,
                        "slot": s.slot,
                    }
                    for s in sorted(stacks, key=lambda s: (s.container, s.slot))
                ],
            },
        )
