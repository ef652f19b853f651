"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry ledger data and transfer outcomes to the menu and the CLI
without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LedgerLineDTO:
    """Output: one stored reagent as displayed to the user."""

    item_id: int
    name: str
    quantity: int
    category: str = ""
    quality: int = 1


@dataclass(frozen=True)
class CategoryPageDTO:
    """Output: one page of a category listing."""

    category: int
    label: str
    page_index: int
    total_pages: int
    total_types: int
    total_quantity: int
    lines: list[LedgerLineDTO]
    has_next: bool
    has_previous: bool


@dataclass(frozen=True)
class ItemDetailDTO:
    """Output: the stored amount of one reagent."""

    item_id: int
    name: str
    stored: int
    max_stack_size: int
    category: int
    quality: int = 1


@dataclass
class TransferReport:
    """Output: the messages a deposit or withdrawal produced."""

    messages: list[str] = field(default_factory=list)
    moved: int = 0

    def add(self, message: str) -> None:
        self.messages.append(message)
