"""
Read paths for orders: per-user history, per-user detail and global statistics.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookstore.core.enums import UNKNOWN_GENRE
from bookstore.core.exceptions import OrderNotFoundError
from bookstore.models.book import Book
from bookstore.models.genre import Genre
from bookstore.models.order import Order, OrderItem
from bookstore.schemas.transaction import OrderDetailRead, OrderRead, TransactionStatistics

logger = logging.getLogger(__name__)


def rank_genres(quantities: Dict[str, int]) -> Tuple[Optional[str], Optional[str]]:
    """
    Return (most sold, fewest sold) genre names.

    Stable descending sort by quantity: ties keep the aggregation's insertion
    order, most is the first entry and fewest the last.
    """
    if not quantities:
        return None, None
    ranked = sorted(quantities.items(), key=lambda entry: entry[1], reverse=True)
    return ranked[0][0], ranked[-1][0]


class OrderQueryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _expanded_orders(self):
        return select(Order).options(
            selectinload(Order.user),
            selectinload(Order.order_items).selectinload(OrderItem.book),
        )

    async def list_orders(self, user_id: str) -> List[OrderRead]:
        """All orders owned by ``user_id``, newest first."""
        query = (
            self._expanded_orders()
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        result = await self.db.execute(query)
        orders = result.scalars().all()
        return [OrderRead.from_orm_model(order) for order in orders]

    async def get_order_detail(self, user_id: str, order_id: str) -> OrderDetailRead:
        """
        Single order owned by ``user_id``.

        Raises:
            OrderNotFoundError: if the order does not exist or belongs to someone else
        """
        query = self._expanded_orders().where(Order.id == order_id, Order.user_id == user_id)
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()

        if not order:
            raise OrderNotFoundError(order_id)

        return OrderDetailRead.from_orm_model(order)

    async def statistics(self) -> TransactionStatistics:
        """Order count, average order value and best/worst selling genre across all users."""
        total_transactions = await self.db.scalar(select(func.count(Order.id))) or 0

        query = (
            select(OrderItem.quantity, Book.price, Genre.name)
            .join(Order, OrderItem.order_id == Order.id)
            .join(Book, OrderItem.book_id == Book.id)
            .outerjoin(Genre, Book.genre_id == Genre.id)
            .order_by(Order.created_at, Order.id, OrderItem.id)
        )
        result = await self.db.execute(query)

        total_revenue = 0.0
        genre_quantities: Dict[str, int] = {}
        for quantity, price, genre_name in result.all():
            total_revenue += price * quantity
            genre = genre_name or UNKNOWN_GENRE
            genre_quantities[genre] = genre_quantities.get(genre, 0) + quantity

        most, fewest = rank_genres(genre_quantities)
        average = total_revenue / total_transactions if total_transactions > 0 else 0

        logger.debug(
            "Statistics over %d orders: revenue %.2f, genres %s",
            total_transactions,
            total_revenue,
            genre_quantities,
        )

        return TransactionStatistics(
            total_transactions=total_transactions,
            average_transaction_amount=average,
            most_book_sales_genre=most,
            fewest_book_sales_genre=fewest,
        )
