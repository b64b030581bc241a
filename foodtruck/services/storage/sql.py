"""
SQL Order Store

Relational store: one row per order in the ``orders`` table, via the
SQLAlchemy async engine. Updates touch a single row inside a transaction
(row-locked on databases that support SELECT ... FOR UPDATE).

Selected with STORAGE_BACKEND=sql; connects to DATABASE_URL
(PostgreSQL through psycopg by default).
"""

import logging
from typing import Any, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError

from foodtruck.database import create_engine, create_session_maker, init_db
from foodtruck.models import OrderRecord
from foodtruck.services.storage.base import (
    BaseOrderStore,
    Order,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)


class SQLOrderStore(BaseOrderStore):
    """
    One table row per order.

    Example:
        >>> store = SQLOrderStore("sqlite+aiosqlite:///orders.db")
        >>> await store.startup()
        >>> await store.insert_order({"id": 1, "status": "pending"})
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_engine(database_url, echo=echo)
        self._session_maker = create_session_maker(self.engine)

        logger.info(f"SQLOrderStore initialized ({self.engine.url.get_backend_name()})")

    @property
    def provider_name(self) -> str:
        return "sql"

    @property
    def display_name(self) -> str:
        return f"SQL ({self.engine.url.get_backend_name()})"

    async def startup(self) -> None:
        await init_db(self.engine)
        logger.info("Orders table created/verified")

    async def close(self) -> None:
        await self.engine.dispose()

    async def list_orders(self) -> list[Order]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(OrderRecord).order_by(OrderRecord.id))
                return [record.to_wire() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error reading orders from database: {e}")
            raise StoreReadError("Failed to read orders from database", e)

    async def get_order(self, order_id: int) -> Optional[Order]:
        try:
            async with self._session_maker() as session:
                record = await session.get(OrderRecord, order_id)
                return record.to_wire() if record else None
        except SQLAlchemyError as e:
            logger.error(f"Error reading order #{order_id} from database: {e}")
            raise StoreReadError("Failed to read order from database", e)

    async def insert_order(self, order: Order) -> Order:
        try:
            async with self._session_maker() as session:
                record = OrderRecord.from_wire(order)
                session.add(record)
                await session.commit()
                return record.to_wire()
        except SQLAlchemyError as e:
            logger.error(f"Error writing order #{order.get('id')} to database: {e}")
            raise StoreWriteError("Failed to write order to database", e)

    async def update_order(self, order_id: int, changes: dict[str, Any]) -> Optional[Order]:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(
                        select(OrderRecord)
                        .where(OrderRecord.id == order_id)
                        .with_for_update()
                    )
                    record = result.scalar_one_or_none()
                    if record is None:
                        return None
                    record.apply_wire(changes)
                return record.to_wire()
        except SQLAlchemyError as e:
            logger.error(f"Error updating order #{order_id} in database: {e}")
            raise StoreWriteError("Failed to update order in database", e)

    async def delete_order(self, order_id: int) -> bool:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(OrderRecord).where(OrderRecord.id == order_id)
                    )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting order #{order_id} from database: {e}")
            raise StoreWriteError("Failed to delete order from database", e)

    async def clear_orders(self) -> None:
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    await session.execute(delete(OrderRecord))
        except SQLAlchemyError as e:
            logger.error(f"Error clearing orders in database: {e}")
            raise StoreWriteError("Failed to clear orders in database", e)

    async def health_check(self) -> bool:
        try:
            async with self._session_maker() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database health check failed: {e}")
            return False
