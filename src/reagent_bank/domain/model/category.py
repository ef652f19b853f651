"""Reagent categories and the eligibility classifier.

The integer value of each Category is the tag persisted in the ledger.
Values follow the trade-goods subclass numbering of the item data, so a
trade-goods item classifies to the category with its own subclass number.
"""

from __future__ import annotations

from enum import IntEnum

from reagent_bank.domain.exceptions import ValidationError


class ItemClass(IntEnum):
    """Item classes the bank cares about. Other classes are never stored."""

    GEM = 3
    TRADE_GOODS = 7


class Category(IntEnum):
    PARTS = 1
    EXPLOSIVES = 2
    DEVICES = 3
    JEWELCRAFTING = 4
    CLOTH = 5
    LEATHER = 6
    METAL_STONE = 7
    MEAT = 8
    HERB = 9
    ELEMENTAL = 10
    OTHER = 11
    ENCHANTING = 12
    NETHER_MATERIAL = 13
    ARMOR_VELLUM = 14
    WEAPON_VELLUM = 15

    @property
    def label(self) -> str:
        return _LABELS[self]

    @staticmethod
    def from_name(name: str) -> Category:
        """Resolve a category from its enum name or its label, case-insensitively."""
        wanted = name.strip().lower()
        for category in Category:
            if wanted in (category.name.lower(), category.label.lower()):
                return category
        raise ValidationError(f"Unknown reagent category: '{name}'")


_LABELS = {
    Category.PARTS: "Parts",
    Category.EXPLOSIVES: "Explosives",
    Category.DEVICES: "Devices",
    Category.JEWELCRAFTING: "Jewelcrafting",
    Category.CLOTH: "Cloth",
    Category.LEATHER: "Leather",
    Category.METAL_STONE: "Metal & Stone",
    Category.MEAT: "Meat",
    Category.HERB: "Herb",
    Category.ELEMENTAL: "Elemental",
    Category.OTHER: "Other Trade Goods",
    Category.ENCHANTING: "Enchanting",
    Category.NETHER_MATERIAL: "Nether Material",
    Category.ARMOR_VELLUM: "Armor Vellum",
    Category.WEAPON_VELLUM: "Weapon Vellum",
}

# Order of the main menu and of the withdraw-everything sweep.
MENU_ORDER: tuple[Category, ...] = (
    Category.CLOTH,
    Category.MEAT,
    Category.METAL_STONE,
    Category.ENCHANTING,
    Category.ELEMENTAL,
    Category.PARTS,
    Category.OTHER,
    Category.HERB,
    Category.LEATHER,
    Category.JEWELCRAFTING,
    Category.EXPLOSIVES,
    Category.DEVICES,
    Category.NETHER_MATERIAL,
    Category.ARMOR_VELLUM,
    Category.WEAPON_VELLUM,
)


def classify(item_class: int, item_subclass: int, max_stack_size: int) -> Category | None:
    """Return the storage category of an item, or None if it is ineligible.

    Only trade goods and gems that stack are storable. Gems always go to
    Jewelcrafting whatever their own subclass; trade goods with a subclass
    that has no category of its own are filed under Other Trade Goods.
    """
    if max_stack_size <= 1:
        return None
    if item_class == ItemClass.GEM:
        return Category.JEWELCRAFTING
    if item_class != ItemClass.TRADE_GOODS:
        return None
    try:
        return Category(item_subclass)
    except ValueError:
        return Category.OTHER
