"""Repository interface for menu catalog lookups."""

from abc import ABC, abstractmethod


class MenuRepo(ABC):
    """Contract for read access to the menu catalog."""

    @abstractmethod
    async def get_items_by_ids(self, item_ids):
        """Return a mapping of id to menu item for every id that exists."""
        raise NotImplementedError

    @abstractmethod
    async def list_available(self):
        """List available menu items ordered by category and name."""
        raise NotImplementedError
