"""Item catalog records and the stacks a character carries."""

from __future__ import annotations

from dataclasses import dataclass, field

from reagent_bank.domain.model.category import Category, classify


@dataclass(frozen=True)
class ItemDefinition:
    """Read-only item data as resolved by the item catalog."""

    item_id: int
    name: str
    item_class: int
    item_subclass: int
    max_stack_size: int
    quality: int = 1
    names: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def category(self) -> Category | None:
        return classify(self.item_class, self.item_subclass, self.max_stack_size)

    def localized_name(self, locale: str | None = None) -> str:
        if locale and locale in self.names:
            return self.names[locale]
        return self.name


@dataclass(frozen=True)
class CarriedStack:
    """A stack sitting in the main pack (container 0) or an equipped bag."""

    item_id: int
    count: int
    container: int
    slot: int


@dataclass(frozen=True)
class GrantedStack:
    """Where a granted quantity ended up."""

    item_id: int
    count: int
    container: int
    slot: int
