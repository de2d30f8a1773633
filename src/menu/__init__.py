"""Menu catalog factory.

Provides get_menu() / set_menu() to swap the catalog implementation.
Defaults to an empty InMemoryMenu.
"""

from menu.memory_adapter import InMemoryMenu
from menu.port import MenuCatalog

_current_menu: MenuCatalog | None = None


def get_menu() -> MenuCatalog:
    """Return the current menu catalog."""
    global _current_menu
    if _current_menu is None:
        _current_menu = InMemoryMenu()
    return _current_menu


def set_menu(menu: MenuCatalog) -> None:
    """Override the active menu catalog (useful for tests)."""
    global _current_menu
    _current_menu = menu


def reset_menu() -> None:
    """Reset to the default catalog."""
    global _current_menu
    _current_menu = None
