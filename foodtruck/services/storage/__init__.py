"""
Order Store Factory

Provides a single entry point for obtaining the order store. The rest of
the application only sees BaseOrderStore and never knows which backend
is active.

Usage:
    from foodtruck.services.storage import get_order_store

    store = get_order_store()
    orders = await store.list_orders()

Backend Selection (STORAGE_BACKEND):
    - auto   → KV when credentials exist, else memory in development,
               else an unconfigured store
    - memory → MemoryOrderStore
    - kv     → KVRestOrderStore (Vercel KV / Upstash REST)
    - redis  → RedisOrderStore (REDIS_URL)
    - sql    → SQLOrderStore (DATABASE_URL)
"""

import logging
from functools import lru_cache

from foodtruck.core.config import Settings, StorageBackend, get_settings
from foodtruck.services.storage.base import (
    BaseOrderStore,
    CollectionOrderStore,
    OrderStoreError,
    StoreNotConfiguredError,
    StoreReadError,
    StoreWriteError,
)
from foodtruck.services.storage.kv import KVRestOrderStore
from foodtruck.services.storage.memory import MemoryOrderStore
from foodtruck.services.storage.redis import RedisOrderStore
from foodtruck.services.storage.sql import SQLOrderStore
from foodtruck.services.storage.unconfigured import UnconfiguredOrderStore

logger = logging.getLogger(__name__)


def build_order_store(settings: Settings) -> BaseOrderStore:
    """
    Create the order store the settings ask for.

    Args:
        settings: Application settings

    Returns:
        BaseOrderStore: Store instance (never None; misconfiguration yields
        an UnconfiguredOrderStore)
    """
    backend = settings.storage_backend

    if backend == StorageBackend.MEMORY:
        logger.info("Order Store: Using MemoryOrderStore")
        return MemoryOrderStore()

    if backend == StorageBackend.REDIS:
        logger.info("Order Store: Using RedisOrderStore")
        return RedisOrderStore(redis_url=settings.redis_url, key=settings.orders_key)

    if backend == StorageBackend.SQL:
        logger.info("Order Store: Using SQLOrderStore")
        return SQLOrderStore(settings.database_url, echo=settings.database_echo)

    try:
        credentials = settings.kv_rest_credentials
    except ValueError as e:
        logger.error(f"Invalid KV_URL: {e}")
        return UnconfiguredOrderStore(f"Invalid KV_URL: {e}")

    if credentials:
        rest_url, token = credentials
        logger.info("Order Store: Using KVRestOrderStore")
        return KVRestOrderStore(
            rest_url,
            token,
            key=settings.orders_key,
            timeout=settings.kv_timeout_seconds,
        )

    if backend == StorageBackend.AUTO and settings.is_development:
        logger.info("Order Store: Using MemoryOrderStore (development mode, no KV configured)")
        return MemoryOrderStore()

    return UnconfiguredOrderStore(
        "Set KV_REST_API_URL and KV_REST_API_TOKEN, or KV_URL"
    )


@lru_cache()
def get_order_store() -> BaseOrderStore:
    """
    Get the configured order store instance.

    The instance is cached so every request shares one client and, for
    the memory backend, one collection.
    """
    return build_order_store(get_settings())


def reset_order_store() -> None:
    """
    Clear the cached order store instance.

    The next call to get_order_store() builds a new one from the current
    settings. Close the old store first if it holds connections.
    """
    get_order_store.cache_clear()
    logger.debug("Order store cache cleared")


__all__ = [
    "build_order_store",
    "get_order_store",
    "reset_order_store",
    "BaseOrderStore",
    "CollectionOrderStore",
    "OrderStoreError",
    "StoreReadError",
    "StoreWriteError",
    "StoreNotConfiguredError",
    "MemoryOrderStore",
    "KVRestOrderStore",
    "RedisOrderStore",
    "SQLOrderStore",
    "UnconfiguredOrderStore",
]
