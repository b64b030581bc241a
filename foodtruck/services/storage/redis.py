"""
Redis Order Store

Keyed store on a plain Redis server. Each order is one field of a hash
(``<key>:by-id``), so creating or deleting an order never rewrites the
others, and updates go through an optimistic WATCH/MULTI transaction.

Selected with STORAGE_BACKEND=redis; connects to REDIS_URL.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError, WatchError

from foodtruck.services.storage.base import (
    BaseOrderStore,
    Order,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)


class RedisOrderStore(BaseOrderStore):
    """
    One hash field per order.

    Attributes:
        hash_key: Redis key of the order hash
        max_update_attempts: WATCH retries before an update gives up
    """

    max_update_attempts = 5

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        key: str = "food-truck-orders",
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Args:
            redis_url: Redis connection string
            key: Base key; the hash lives at "<key>:by-id"
            client: Pre-built client (tests)
        """
        self.hash_key = f"{key}:by-id"
        self._client = client or aioredis.from_url(redis_url, decode_responses=True)

        logger.info(f"RedisOrderStore initialized (hash={self.hash_key})")

    @property
    def provider_name(self) -> str:
        return "redis"

    @property
    def display_name(self) -> str:
        return "Redis"

    async def close(self) -> None:
        await self._client.aclose()

    async def list_orders(self) -> list[Order]:
        try:
            records = await self._client.hgetall(self.hash_key)
        except RedisError as e:
            logger.error(f"Error reading orders from Redis: {e}")
            raise StoreReadError("Failed to read orders from Redis", e)

        # ids come from a clock, so id order is insertion order
        return [json.loads(records[field]) for field in sorted(records, key=int)]

    async def get_order(self, order_id: int) -> Optional[Order]:
        try:
            raw = await self._client.hget(self.hash_key, str(order_id))
        except RedisError as e:
            logger.error(f"Error reading order #{order_id} from Redis: {e}")
            raise StoreReadError("Failed to read order from Redis", e)

        return json.loads(raw) if raw is not None else None

    async def insert_order(self, order: Order) -> Order:
        try:
            await self._client.hset(self.hash_key, str(order["id"]), json.dumps(order))
        except RedisError as e:
            logger.error(f"Error writing order #{order['id']} to Redis: {e}")
            raise StoreWriteError("Failed to write order to Redis", e)
        return order

    async def update_order(self, order_id: int, changes: dict[str, Any]) -> Optional[Order]:
        field = str(order_id)

        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for attempt in range(1, self.max_update_attempts + 1):
                    try:
                        await pipe.watch(self.hash_key)
                        raw = await pipe.hget(self.hash_key, field)
                        if raw is None:
                            return None

                        order = {**json.loads(raw), **changes}
                        pipe.multi()
                        pipe.hset(self.hash_key, field, json.dumps(order))
                        await pipe.execute()
                        return order
                    except WatchError:
                        logger.debug(f"Order #{order_id} changed during update (attempt {attempt})")
        except RedisError as e:
            logger.error(f"Error updating order #{order_id} in Redis: {e}")
            raise StoreWriteError("Failed to update order in Redis", e)

        raise StoreWriteError(
            f"Order #{order_id} kept changing, gave up after {self.max_update_attempts} attempts"
        )

    async def delete_order(self, order_id: int) -> bool:
        try:
            removed = await self._client.hdel(self.hash_key, str(order_id))
        except RedisError as e:
            logger.error(f"Error deleting order #{order_id} from Redis: {e}")
            raise StoreWriteError("Failed to delete order from Redis", e)
        return removed > 0

    async def clear_orders(self) -> None:
        try:
            await self._client.delete(self.hash_key)
        except RedisError as e:
            logger.error(f"Error clearing orders in Redis: {e}")
            raise StoreWriteError("Failed to clear orders in Redis", e)

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning(f"Redis health check failed: {e}")
            return False
