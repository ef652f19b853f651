"""Ledger entries and the owner key they are partitioned by.

A LedgerEntry is one (owner, item) row of the reagent bank. Rows exist
only while they hold something: a quantity of zero means the row is
deleted, so an entry can never be constructed with a quantity below one.
"""

from __future__ import annotations

from dataclasses import dataclass

from reagent_bank.domain.exceptions import ValidationError
from reagent_bank.domain.model.category import Category


@dataclass(frozen=True)
class OwnerKey:
    """Addressing identity of a ledger partition.

    Exactly one component is non-zero: ``account_key`` in account-wide
    mode, ``individual_key`` in per-character mode.
    """

    account_key: int
    individual_key: int

    def __post_init__(self) -> None:
        if self.account_key < 0 or self.individual_key < 0:
            raise ValidationError("Owner key components cannot be negative")
        if (self.account_key == 0) == (self.individual_key == 0):
            raise ValidationError(
                "Exactly one of account_key and individual_key must be non-zero, "
                f"got ({self.account_key}, {self.individual_key})"
            )

    @staticmethod
    def for_player(account_id: int, character_id: int, account_wide: bool) -> OwnerKey:
        if account_wide:
            return OwnerKey(account_key=account_id, individual_key=0)
        return OwnerKey(account_key=0, individual_key=character_id)

    def __str__(self) -> str:
        if self.account_key:
            return f"account:{self.account_key}"
        return f"character:{self.individual_key}"


@dataclass(frozen=True)
class LedgerEntry:
    """One stored reagent. ``quantity`` is always at least 1."""

    owner: OwnerKey
    item_id: int
    category: Category
    quantity: int

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity <= 0:
            raise ValidationError(
                f"Ledger quantity must be positive, got {self.quantity} "
                f"for item {self.item_id}"
            )

    def with_quantity(self, quantity: int) -> LedgerEntry | None:
        """Return this entry holding ``quantity``, or None when that empties it."""
        if quantity == 0:
            return None
        return LedgerEntry(self.owner, self.item_id, self.category, quantity)
