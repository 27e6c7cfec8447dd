"""Repository interface for dining tables."""

from abc import ABC, abstractmethod


class TablesRepo(ABC):
    """Contract for table lookups."""

    @abstractmethod
    async def get_table(self, table_id):
        """Return the table with ``table_id`` or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def list_tables(self):
        """List all tables ordered by number."""
        raise NotImplementedError
