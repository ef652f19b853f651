"""Per-user bank session context."""

from __future__ import annotations

from dataclasses import dataclass, field

from reagent_bank.domain.model.ledger import OwnerKey
from reagent_bank.domain.model.navigation import NavigationState
from reagent_bank.domain.port.receiving_inventory import ReceivingInventory
from reagent_bank.domain.port.session_gateway import SessionGateway


@dataclass
class BankSession:
    """Everything the menu needs about one connected user.

    The navigation state lives here, so it goes away with the session.
    """

    owner: OwnerKey
    inventory: ReceivingInventory
    gateway: SessionGateway
    navigation: NavigationState = field(default_factory=NavigationState)
    locale: str | None = None
