"""Repository interface for order persistence."""

from abc import ABC, abstractmethod


class OrdersRepo(ABC):
    """Contract for order persistence and manipulation.

    Mutations take the status the caller expects the order to be in and
    raise ``StatusConflict`` when the stored status differs, so concurrent
    writers cannot overwrite each other.
    """

    @abstractmethod
    async def insert(self, order):
        """Persist a new order; raise ``DuplicateKey`` on a taken order number."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, order_id):
        """Return the order with ``order_id`` or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def update_items(self, order_id, items, notes, expected_status):
        """Replace items and notes of an order still in ``expected_status``."""
        raise NotImplementedError

    @abstractmethod
    async def set_paid(self, order_id, payment_type, expected_status):
        """Mark an order still in ``expected_status`` as paid."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, statuses=None, start=None, end=None, newest_first=False):
        """List orders filtered by status and inclusive creation window."""
        raise NotImplementedError
