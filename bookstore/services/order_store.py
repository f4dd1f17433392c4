from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.models._common import new_uuid
from bookstore.models.order import Order, OrderItem
from bookstore.services.storage_errors import storage_errors


class OrderStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_order(self, user_id: str, lines: Iterable) -> str:
        """
        Add an order header and one item per line to the current transaction.

        ``lines`` are objects with ``book_id`` and ``quantity``. Nothing is
        committed here; the caller's unit of work decides.
        """
        order = Order(
            id=new_uuid(),
            user_id=user_id,
            order_items=[
                OrderItem(book_id=line.book_id, quantity=line.quantity)
                for line in lines
            ],
        )
        self.session.add(order)
        with storage_errors("insert_order"):
            await self.session.flush()
        return order.id
