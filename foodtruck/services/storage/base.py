"""
Order Store Abstract Base Classes

Defines the interface contract for every order store implementation.
The HTTP layer only ever talks to a BaseOrderStore, so the backing
system (process memory, Vercel KV, Redis, a SQL database) can be
switched through configuration alone.

Two families exist:
    - CollectionOrderStore: the whole collection lives under one key and
      every operation reads it, changes it in memory and writes it back.
    - Keyed stores (Redis, SQL): one record per order, updated in place.

Store methods raise OrderStoreError subclasses and never return error
flags; deciding what a failure means for the client is the order
service's job.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


Order = dict[str, Any]


class OrderStoreError(Exception):
    """Base class for failures talking to the order store."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class StoreReadError(OrderStoreError):
    """The store could not be read."""


class StoreWriteError(OrderStoreError):
    """The store could not be written."""


class StoreNotConfiguredError(OrderStoreError):
    """No storage credentials were provided."""


class BaseOrderStore(ABC):
    """
    Abstract base class for order stores.

    Orders are plain dicts in wire form (camelCase keys), exactly as the
    API returns them.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the short name of the backend.

        Returns:
            str: Provider name (e.g., "memory", "kv", "redis", "sql")
        """
        pass

    @property
    def display_name(self) -> str:
        """Human readable backend name reported by the health check."""
        return self.provider_name

    @property
    def is_configured(self) -> bool:
        """Whether the store has what it needs to persist orders."""
        return True

    async def startup(self) -> None:
        """Prepare the backend (create tables, open pools). Optional."""

    async def close(self) -> None:
        """Release connections held by the backend. Optional."""

    @abstractmethod
    async def list_orders(self) -> list[Order]:
        """Return every order in stored order."""
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]:
        """Return the order with this id, or None."""
        pass

    @abstractmethod
    async def insert_order(self, order: Order) -> Order:
        """
        Append a new order.

        Args:
            order: Complete order including id and createdAt

        Returns:
            The order as persisted
        """
        pass

    @abstractmethod
    async def update_order(self, order_id: int, changes: dict[str, Any]) -> Optional[Order]:
        """
        Shallow-merge changes over an existing order.

        Args:
            order_id: Order to change
            changes: Wire-form fields to overwrite

        Returns:
            The merged order, or None when the id is unknown
        """
        pass

    @abstractmethod
    async def delete_order(self, order_id: int) -> bool:
        """
        Remove one order.

        Returns:
            bool: True if an order was removed
        """
        pass

    @abstractmethod
    async def clear_orders(self) -> None:
        """Remove every order."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the backend.

        Returns:
            bool: True if the store answered
        """
        pass


class CollectionOrderStore(BaseOrderStore):
    """
    Store that persists the whole order list as a single value.

    Subclasses provide read_collection/write_collection; every operation
    here is a full read, an in-memory change and, for mutations, a full
    write. Two concurrent writers can overwrite each other's change.
    """

    @abstractmethod
    async def read_collection(self) -> list[Order]:
        """
        Fetch the full collection.

        Returns:
            list: Orders, empty when nothing has been stored yet

        Raises:
            StoreReadError: If the backend could not be read
        """
        pass

    @abstractmethod
    async def write_collection(self, orders: list[Order]) -> None:
        """
        Overwrite the full collection.

        Raises:
            StoreWriteError: If the backend could not be written
        """
        pass

    async def list_orders(self) -> list[Order]:
        return await self.read_collection()

    async def get_order(self, order_id: int) -> Optional[Order]:
        orders = await self.read_collection()
        return next((o for o in orders if o.get("id") == order_id), None)

    async def insert_order(self, order: Order) -> Order:
        orders = await self.read_collection()
        orders.append(order)
        await self.write_collection(orders)
        return order

    async def update_order(self, order_id: int, changes: dict[str, Any]) -> Optional[Order]:
        orders = await self.read_collection()
        index = next((i for i, o in enumerate(orders) if o.get("id") == order_id), None)

        if index is None:
            return None

        orders[index] = {**orders[index], **changes}
        await self.write_collection(orders)
        return orders[index]

    async def delete_order(self, order_id: int) -> bool:
        orders = await self.read_collection()
        remaining = [o for o in orders if o.get("id") != order_id]

        if len(remaining) == len(orders):
            return False

        await self.write_collection(remaining)
        return True

    async def clear_orders(self) -> None:
        await self.write_collection([])
