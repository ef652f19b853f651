"""Per-user navigation state of the bank menu.

The state is a single current view plus the category/page an item
submenu returns to. It belongs to the user's session object and is
handed to the menu by reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reagent_bank.domain.model.category import Category


@dataclass(frozen=True)
class MainMenu:
    pass


@dataclass(frozen=True)
class CategoryView:
    category: Category
    page: int = 0


@dataclass(frozen=True)
class ItemSubmenu:
    item_id: int
    return_category: Category | None
    return_page: int = 0


View = MainMenu | CategoryView | ItemSubmenu


@dataclass
class NavigationState:
    view: View = field(default_factory=MainMenu)

    # --- Transitions ----------------------------------------------------------

    def show_main_menu(self) -> None:
        self.view = MainMenu()

    def show_category(self, category: Category, page: int) -> None:
        """Enter a category view. ``page`` must already be clamped."""
        self.view = CategoryView(category=category, page=page)

    def open_item(
        self,
        item_id: int,
        category: Category | None = None,
        page: int | None = None,
    ) -> ItemSubmenu:
        """Enter an item submenu, remembering where to return.

        Explicit ``category``/``page`` win; otherwise the current category
        view (if any) is the return target.
        """
        return_category, return_page = self.last_category, self.last_page
        if category is not None:
            return_category = category
            return_page = page if page is not None else 0
        self.view = ItemSubmenu(
            item_id=item_id,
            return_category=return_category,
            return_page=return_page,
        )
        return self.view

    def return_target(self) -> View:
        """Where a finished item action or a Back selection leads."""
        if isinstance(self.view, ItemSubmenu):
            if self.view.return_category is None:
                return MainMenu()
            return CategoryView(self.view.return_category, self.view.return_page)
        return MainMenu()

    # --- Accessors ------------------------------------------------------------

    @property
    def last_category(self) -> Category | None:
        if isinstance(self.view, CategoryView):
            return self.view.category
        if isinstance(self.view, ItemSubmenu):
            return self.view.return_category
        return None

    @property
    def last_page(self) -> int:
        if isinstance(self.view, CategoryView):
            return self.view.page
        if isinstance(self.view, ItemSubmenu):
            return self.view.return_page
        return 0
