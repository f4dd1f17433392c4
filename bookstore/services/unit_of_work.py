"""
Unit of work for order creation.

Usage::

    async with UnitOfWork(async_session) as uow:
        snapshot = await uow.books.find_books_by_ids(ids)
        order_id = await uow.orders.insert_order(user_id, lines)

Leaving the block normally commits. Any exception, including task
cancellation, rolls back. The session is closed on every path.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from bookstore.database import WRITE_LOCK_OPTION
from bookstore.services.catalog_store import CatalogStore
from bookstore.services.order_store import OrderStore
from bookstore.services.storage_errors import storage_errors

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory
        self.session = None
        self.books = None
        self.orders = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self._session_factory()
        try:
            # Begin now so the whole unit runs under the write lock on SQLite
            with storage_errors("begin"):
                await self.session.connection(execution_options={WRITE_LOCK_OPTION: True})
        except BaseException:
            await self.session.close()
            raise
        self.books = CatalogStore(self.session)
        self.orders = OrderStore(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if exc_type is None:
                with storage_errors("commit"):
                    await self.session.commit()
            else:
                await self._rollback()
        finally:
            await self.session.close()
        return False

    async def _rollback(self):
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            # close() still releases the connection, which discards the transaction
            logger.error("Rollback failed: %s", e, exc_info=True)
