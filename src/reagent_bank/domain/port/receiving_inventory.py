"""Port to the character inventory that reagents leave and enter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from reagent_bank.domain.model.item import CarriedStack, GrantedStack


class ReceivingInventory(ABC):

    @abstractmethod
    def carried_stacks(self) -> list[CarriedStack]:
        """Every stack in the main pack and the equipped bags."""

    @abstractmethod
    def check_capacity(self, item_id: int, quantity: int, max_stack_size: int) -> bool:
        """True if exactly ``quantity`` units of the item would fit right now."""

    @abstractmethod
    def grant(self, item_id: int, quantity: int, max_stack_size: int) -> GrantedStack:
        """Place ``quantity`` units. Callers check capacity first."""

    @abstractmethod
    def remove_carried(self, container: int, slot: int) -> None:
        """Destroy the stack in a container slot."""

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Keep other writers out of the inventory for the duration of the block.

        Inventories shared with other processes override this; the default
        does nothing.
        """
        yield
