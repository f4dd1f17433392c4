"""
Catalog access used by order creation: stock/price snapshots and the
conditional stock decrement.
"""

from dataclasses import dataclass
from typing import Iterable, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.models._common import utc_now
from bookstore.models.book import Book
from bookstore.services.storage_errors import storage_errors


@dataclass(frozen=True)
class BookSnapshot:
    id: str
    title: str
    price: float
    stock_quantity: int
    is_active: bool = True


class CatalogStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_books_by_ids(self, book_ids: Iterable[str]) -> List[BookSnapshot]:
        """Return snapshots for the active (not soft-deleted) books among ``book_ids``."""
        ids = list(dict.fromkeys(book_ids))
        if not ids:
            return []

        query = (
            select(Book.id, Book.title, Book.price, Book.stock_quantity)
            .where(Book.id.in_(ids), Book.deleted_at.is_(None))
        )
        with storage_errors("find_books_by_ids"):
            result = await self.session.execute(query)
            rows = result.all()

        return [
            BookSnapshot(
                id=row.id,
                title=row.title,
                price=row.price,
                stock_quantity=row.stock_quantity,
            )
            for row in rows
        ]

    async def decrement_stock_if_sufficient(self, book_id: str, quantity: int) -> bool:
        """
        Lower the book's stock by ``quantity`` if it is still active and has enough.

        The condition is evaluated by the database at write time, so a
        concurrent decrement committed after our snapshot makes this return
        False instead of driving stock negative.
        """
        if quantity <= 0:
            raise ValueError(f"Decrement quantity must be positive, got {quantity}")

        stmt = (
            update(Book)
            .where(
                Book.id == book_id,
                Book.deleted_at.is_(None),
                Book.stock_quantity >= quantity,
            )
            .values(stock_quantity=Book.stock_quantity - quantity, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        with storage_errors("decrement_stock_if_sufficient"):
            result = await self.session.execute(stmt)

        return result.rowcount == 1
