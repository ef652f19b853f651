"""Menu options exchanged with the session gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from reagent_bank.domain.model.category import Category


class MenuAction(Enum):
    NOOP = "NOOP"
    MAIN_MENU = "MAIN_MENU"
    SHOW_CATEGORY = "SHOW_CATEGORY"
    SHOW_ITEM = "SHOW_ITEM"
    DEPOSIT_ALL = "DEPOSIT_ALL"
    WITHDRAW_ALL = "WITHDRAW_ALL"
    WITHDRAW_ONE = "WITHDRAW_ONE"
    WITHDRAW_STACK = "WITHDRAW_STACK"
    WITHDRAW_ITEM_ALL = "WITHDRAW_ITEM_ALL"


@dataclass(frozen=True)
class MenuOption:
    """One selectable row.

    ``category`` scopes DEPOSIT_ALL/WITHDRAW_ALL (None means every
    category) and names the listing for SHOW_CATEGORY and SHOW_ITEM.
    ``page`` is the listing page to show or to return to. ``item_id`` is
    set for the item actions. ``quality`` marks rows that name an item so
    the gateway can colour them; None leaves the label plain.
    """

    label: str
    action: MenuAction
    category: Category | None = None
    page: int = 0
    item_id: int | None = None
    quality: int | None = None
