"""In-memory menu catalog for development and testing."""

from menu.port import MenuCatalog, MenuItem


class InMemoryMenu(MenuCatalog):
    def __init__(self, items: list[MenuItem] | None = None) -> None:
        self._items: dict[str, MenuItem] = {}
        for item in items or []:
            self.add_item(item)

    def add_item(self, item: MenuItem) -> None:
        self._items[item.menu_item_id] = item

    def remove_item(self, menu_item_id: str) -> None:
        self._items.pop(menu_item_id, None)

    def get_item(self, menu_item_id: str) -> MenuItem | None:
        return self._items.get(menu_item_id)
