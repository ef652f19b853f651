"""Category listing order and page windows."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from reagent_bank.domain.exceptions import ValidationError


@dataclass(frozen=True)
class PageWindow:
    """The slice of a sorted listing shown on one page.

    ``start``/``end`` form a half-open range into the listing.
    """

    page_index: int
    total_pages: int
    start: int
    end: int

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def page_number(self) -> int:
        """One-based page number for display."""
        return self.page_index + 1


def paginate(total_items: int, page_size: int, requested_page: int) -> PageWindow:
    """Clamp ``requested_page`` and compute the range it shows."""
    if page_size <= 0:
        raise ValidationError("Page size must be positive")
    if total_items < 0:
        raise ValidationError("Item count cannot be negative")

    total_pages = max(1, -(-total_items // page_size))
    page_index = min(max(requested_page, 0), total_pages - 1)
    start = page_index * page_size
    end = min(total_items, (page_index + 1) * page_size)
    return PageWindow(
        page_index=page_index,
        total_pages=total_pages,
        start=min(start, end),
        end=end,
    )


def sort_for_display(item_ids: Sequence[int], name_of: Callable[[int], str]) -> list[int]:
    """Sort by case-insensitive display name, ties by item id ascending."""
    return sorted(item_ids, key=lambda item_id: (name_of(item_id).lower(), item_id))
