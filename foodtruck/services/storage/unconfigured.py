"""
Unconfigured Order Store

Stand-in used when no storage credentials were found outside development
mode. The API still starts and the health check reports the missing
configuration; reads come back empty and writes fail immediately.
"""

import logging
from typing import Any, NoReturn, Optional

from foodtruck.services.storage.base import (
    BaseOrderStore,
    Order,
    StoreNotConfiguredError,
)

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Order storage is not configured"


class UnconfiguredOrderStore(BaseOrderStore):
    """Every operation raises StoreNotConfiguredError."""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or NOT_CONFIGURED_MESSAGE
        logger.warning(f"UnconfiguredOrderStore in use: {self.reason}")

    @property
    def provider_name(self) -> str:
        return "unconfigured"

    @property
    def display_name(self) -> str:
        return "Not configured"

    @property
    def is_configured(self) -> bool:
        return False

    def _fail(self) -> NoReturn:
        raise StoreNotConfiguredError(NOT_CONFIGURED_MESSAGE)

    async def list_orders(self) -> list[Order]:
        self._fail()

    async def get_order(self, order_id: int) -> Optional[Order]:
        self._fail()

    async def insert_order(self, order: Order) -> Order:
        self._fail()

    async def update_order(self, order_id: int, changes: dict[str, Any]) -> Optional[Order]:
        self._fail()

    async def delete_order(self, order_id: int) -> bool:
        self._fail()

    async def clear_orders(self) -> None:
        self._fail()

    async def health_check(self) -> bool:
        return False
