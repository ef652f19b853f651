"""Domain-level exceptions.

All failures of a bank operation are expressed as subclasses of
DomainException so the menu and CLI layers can catch them uniformly and
report a user-friendly message. None of them is fatal to the host.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CapacityExceeded(DomainException):
    """The receiving inventory cannot hold the requested amount."""

    def __init__(self, item_id: int, quantity: int, item_name: str) -> None:
        super().__init__(
            f"Not enough bag space to withdraw {quantity} x {item_name}."
        )
        self.item_id = item_id
        self.quantity = quantity
        self.item_name = item_name


class ItemDefinitionMissing(DomainException):
    """The item catalog has no definition for a stored item."""

    def __init__(self, item_id: int) -> None:
        super().__init__(f"Error: Item definition not found for entry {item_id}.")
        self.item_id = item_id


class SessionClosedError(DomainException):
    """The session gateway can no longer deliver menus or messages."""
