"""Port to the user's session: menus out, messages out.

Implementations raise SessionClosedError once the user is gone.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from reagent_bank.domain.model.menu import MenuOption


class SessionGateway(ABC):

    @abstractmethod
    def render_menu(self, options: Sequence[MenuOption]) -> None:
        """Show an ordered list of selectable options."""

    @abstractmethod
    def report_message(self, text: str) -> None:
        """Show a one-line system message."""

    @abstractmethod
    def close_menu(self) -> None:
        """Dismiss the current menu."""
