from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookstore.core.config import Settings, get_settings
from bookstore.database import async_session
from bookstore.services.order_query_service import OrderQueryService
from bookstore.services.transaction_service import TransactionService


def get_session_factory() -> async_sessionmaker:
    """Session factory used for units of work; overridden in tests."""
    return async_session


async def get_db(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_transaction_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
) -> TransactionService:
    return TransactionService(session_factory, max_attempts=settings.ORDER_COMMIT_ATTEMPTS)


def get_order_query_service(db: AsyncSession = Depends(get_db)) -> OrderQueryService:
    return OrderQueryService(db)
