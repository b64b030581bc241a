"""
Order Service

The six order operations behind the HTTP routes. Owns order creation
rules (id assignment, defaults, timestamps), the update allow-list and
the mapping of store failures onto API errors:

    - read failures on list/get degrade to an empty or not-found result
    - any failure on a mutating call becomes a 500, including the read
      that precedes the write, so a degraded empty read can never be
      written back over stored orders
"""

import logging
import threading
import time
from functools import lru_cache
from typing import Any, Callable, Optional

from foodtruck.core.clock import utc_now_iso
from foodtruck.core.errors import OrderNotFoundError, OrderStorageFailedError
from foodtruck.schemas import KNOWN_STATUSES, OrderCreate, OrderStatus, OrderUpdate
from foodtruck.services.storage import (
    BaseOrderStore,
    OrderStoreError,
    StoreNotConfiguredError,
    get_order_store,
)
from foodtruck.services.storage.base import Order

logger = logging.getLogger(__name__)

# Keys only the server may set on a new order
SERVER_FIELDS = ("id", "status", "createdAt", "updatedAt")


class OrderIdGenerator:
    """
    Millisecond-clock order ids.

    Ids never repeat or go backwards within one process: a second order
    in the same millisecond gets the previous id plus one. Separate
    processes can still collide.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


def _failure_message(error: OrderStoreError) -> Optional[str]:
    if isinstance(error, StoreNotConfiguredError):
        return error.message
    return None


class OrderService:
    """
    Order operations over any BaseOrderStore.

    Example:
        >>> service = OrderService(MemoryOrderStore())
        >>> order = await service.create_order(OrderCreate(total=8.5))
        >>> order["status"]
        'pending'
    """

    def __init__(
        self,
        store: BaseOrderStore,
        id_generator: Optional[OrderIdGenerator] = None,
    ):
        self.store = store
        self.id_generator = id_generator or OrderIdGenerator()

    async def list_orders(self) -> list[Order]:
        """Every order; an unreadable store yields an empty list."""
        try:
            return await self.store.list_orders()
        except OrderStoreError as e:
            logger.error(f"Error fetching orders, returning empty list: {e}")
            return []

    async def get_order(self, order_id: int) -> Order:
        """
        Look up one order.

        Raises:
            OrderNotFoundError: Unknown id, or the store could not be read
        """
        try:
            order = await self.store.get_order(order_id)
        except OrderStoreError as e:
            logger.error(f"Error fetching order #{order_id}: {e}")
            order = None

        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def create_order(self, payload: OrderCreate) -> Order:
        """
        Place a new order.

        Client fields are merged over the defaults; id, status and
        createdAt are always set here.

        Raises:
            OrderStorageFailedError: The order could not be persisted
        """
        fields = {k: v for k, v in payload.to_fields().items() if k not in SERVER_FIELDS}

        order = {
            "id": self.id_generator.next_id(),
            **fields,
            "status": OrderStatus.PENDING.value,
            "createdAt": utc_now_iso(),
        }

        try:
            order = await self.store.insert_order(order)
        except OrderStoreError as e:
            logger.error(f"Error creating order: {e}")
            raise OrderStorageFailedError("Failed to save order", _failure_message(e))

        logger.info(f"✅ New order placed: #{order['id']} - {order.get('customerName')}")
        return order

    async def update_order(self, order_id: int, updates: OrderUpdate) -> Order:
        """
        Merge allowed fields over an existing order and stamp updatedAt.

        Raises:
            OrderNotFoundError: Unknown id
            OrderStorageFailedError: The change could not be persisted
        """
        changes: dict[str, Any] = updates.to_changes()

        status = changes.get("status")
        if status is not None and status not in KNOWN_STATUSES:
            logger.warning(f"Order #{order_id} set to unrecognised status {status!r}")

        changes["updatedAt"] = utc_now_iso()

        try:
            order = await self.store.update_order(order_id, changes)
        except OrderStoreError as e:
            logger.error(f"Error updating order #{order_id}: {e}")
            raise OrderStorageFailedError("Failed to update order", _failure_message(e))

        if order is None:
            raise OrderNotFoundError(order_id)

        logger.info(f"🔄 Order #{order['id']} status updated to: {order.get('status')}")
        return order

    async def delete_order(self, order_id: int) -> None:
        """
        Remove one order.

        Raises:
            OrderNotFoundError: Unknown id
            OrderStorageFailedError: The removal could not be persisted
        """
        try:
            removed = await self.store.delete_order(order_id)
        except OrderStoreError as e:
            logger.error(f"Error deleting order #{order_id}: {e}")
            raise OrderStorageFailedError("Failed to delete order", _failure_message(e))

        if not removed:
            raise OrderNotFoundError(order_id)

        logger.info(f"🗑️  Order #{order_id} deleted")

    async def clear_orders(self) -> None:
        """
        Remove every order. Safe to repeat.

        Raises:
            OrderStorageFailedError: The store could not be written
        """
        try:
            await self.store.clear_orders()
        except OrderStoreError as e:
            logger.error(f"Error clearing orders: {e}")
            raise OrderStorageFailedError("Failed to clear orders", _failure_message(e))

        logger.info("🗑️  All orders cleared")


@lru_cache()
def get_order_service() -> OrderService:
    """Shared OrderService bound to the configured store."""
    return OrderService(get_order_store())
