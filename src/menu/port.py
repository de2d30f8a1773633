"""Menu catalog port (abstract interface).

Order placement only needs to look up the current name, price and
availability of a menu item. Menu and category CRUD live elsewhere.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class MenuItem:
    """Current catalog entry for a dish."""

    menu_item_id: str
    name: str
    price: float
    available: bool = True
    category: str | None = None


class MenuCatalog(ABC):
    @abstractmethod
    def get_item(self, menu_item_id: str) -> MenuItem | None:
        """Return the catalog entry, or None when it does not exist."""
        ...
