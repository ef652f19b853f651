"""Outcomes of deposit and withdraw operations.

Empty outcomes are ordinary values, not errors: the caller reports them
as informational messages. Partial withdrawals are ordinary values too.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reagent_bank.domain.model.category import Category


@dataclass(frozen=True)
class DepositResult:
    category: Category | None
    deposited: dict[int, int] = field(default_factory=dict)
    totals: dict[int, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.deposited


@dataclass(frozen=True)
class WithdrawResult:
    """What one withdraw request moved for a single item.

    ``blocked`` is set when a capacity check stopped the transfer before
    ``remaining`` reached zero.
    """

    item_id: int
    item_name: str
    granted: int = 0
    remaining: int = 0
    stacks: tuple[int, ...] = ()
    blocked: bool = False

    @property
    def is_empty(self) -> bool:
        """Nothing was stored, so nothing could be withdrawn."""
        return self.granted == 0 and self.remaining == 0 and not self.blocked


@dataclass(frozen=True)
class CategoryWithdrawResult:
    category: Category
    results: tuple[WithdrawResult, ...] = ()
    missing_definitions: tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.results and not self.missing_definitions

    @property
    def granted_any(self) -> bool:
        return any(result.granted > 0 for result in self.results)
