"""
In-Memory Order Store

Keeps the order collection in process memory. Used in development mode
(ENV_MODE=development) when no KV credentials are configured, and by the
test suite.

Behavior:
    - Orders are lost when the process exits
    - Reads and writes hand out deep copies, so callers can never mutate
      stored state without a write
    - fail_reads / fail_writes simulate an unreachable backend
"""

import copy
import logging
from typing import Optional

from foodtruck.services.storage.base import (
    CollectionOrderStore,
    Order,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)


class MemoryOrderStore(CollectionOrderStore):
    """
    Whole-collection store backed by a Python list.

    Attributes:
        fail_reads: Raise StoreReadError on every read
        fail_writes: Raise StoreWriteError on every write

    Example:
        >>> store = MemoryOrderStore()
        >>> await store.insert_order({"id": 1, "status": "pending"})
        >>> len(await store.list_orders())
        1
    """

    def __init__(
        self,
        orders: Optional[list[Order]] = None,
        fail_reads: bool = False,
        fail_writes: bool = False,
    ):
        self._orders: list[Order] = copy.deepcopy(orders or [])
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

        logger.info(f"MemoryOrderStore initialized ({len(self._orders)} orders)")

    @property
    def provider_name(self) -> str:
        return "memory"

    @property
    def display_name(self) -> str:
        return "In-memory (not persistent)"

    async def read_collection(self) -> list[Order]:
        if self.fail_reads:
            raise StoreReadError("Simulated read failure")
        return copy.deepcopy(self._orders)

    async def write_collection(self, orders: list[Order]) -> None:
        if self.fail_writes:
            raise StoreWriteError("Simulated write failure")
        self._orders = copy.deepcopy(orders)

    async def health_check(self) -> bool:
        return not self.fail_reads
