"""
Purpose: Creates orders (transactions) and lowers book stock as one atomic unit.

Role: The only writer of book stock. An order is committed only if every
line's conditional decrement succeeds inside the same unit of work as the
order insert, so two racing orders that together would oversell a book can
never both commit.

Flow for create_order():
- parse and coerce the line items (no storage access on bad input)
- advisory inventory check on a read snapshot, to fail fast
- inside a UnitOfWork: re-validate on a fresh snapshot, insert the order and
  its items, apply conditional decrements in book-id order
- a lost decrement race aborts the unit; the whole sequence is retried a
  bounded number of times before the conflict is surfaced
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from sqlalchemy.ext.asyncio import async_sessionmaker

from bookstore.core.exceptions import (
    AuthenticationError,
    CommitConflictError,
    StorageError,
    TransactionFailedError,
)
from bookstore.schemas.transaction import LineItemRequest
from bookstore.services.catalog_store import CatalogStore
from bookstore.services.inventory_validator import InventoryValidator, parse_line_items
from bookstore.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderResult:
    transaction_id: str
    total_quantity: int
    total_price: float


class TransactionService:
    def __init__(self, session_factory: async_sessionmaker, max_attempts: int = 3):
        self.session_factory = session_factory
        self.max_attempts = max(1, max_attempts)

    async def create_order(self, user_id: str, items: Any) -> OrderResult:
        """
        Create an order for ``user_id`` and decrement stock for every line.

        Args:
            user_id: Authenticated user id
            items: Line items, as ``LineItemRequest`` objects or raw mappings

        Returns:
            OrderResult with the new order id and computed totals

        Raises:
            AuthenticationError: if user_id is empty
            InvalidInputError: if items are missing or a quantity is invalid
            UnknownBooksError: if a book is missing or soft-deleted
            InsufficientStockError: if a book cannot cover its line
            CommitConflictError: if concurrent orders kept winning the stock race
            TransactionFailedError: if storage failed; nothing was persisted
        """
        if not user_id:
            raise AuthenticationError("User not authenticated.")

        line_items = parse_line_items(items)

        await self._precheck(line_items)

        attempt = 1
        while True:
            try:
                result = await self._commit_order(user_id, line_items)
            except CommitConflictError as e:
                if attempt >= self.max_attempts:
                    logger.warning(
                        "Order for user %s lost the stock race on book %s after %d attempt(s)",
                        user_id,
                        e.book_id,
                        attempt,
                    )
                    raise
                logger.info(
                    "Stock race lost on book %s for user %s, retrying (attempt %d/%d)",
                    e.book_id,
                    user_id,
                    attempt + 1,
                    self.max_attempts,
                )
                attempt += 1
                continue

            logger.info(
                "Order %s committed for user %s: %d item(s), total %.2f",
                result.transaction_id,
                user_id,
                result.total_quantity,
                result.total_price,
            )
            return result

    async def _precheck(self, line_items: List[LineItemRequest]) -> None:
        """Advisory check on a read snapshot. Rejects early; does not reserve anything."""
        try:
            async with self.session_factory() as session:
                await InventoryValidator(CatalogStore(session)).validate(line_items)
        except StorageError as e:
            logger.error("Inventory check failed: %s", e)
            raise TransactionFailedError(e.kind) from e

    async def _commit_order(self, user_id: str, line_items: List[LineItemRequest]) -> OrderResult:
        try:
            async with UnitOfWork(self.session_factory) as uow:
                validated = await InventoryValidator(uow.books).validate(line_items)
                order_id = await uow.orders.insert_order(user_id, validated.lines)

                quantities = {line.book_id: line.quantity for line in validated.lines}
                # Fixed lock order across concurrent transactions
                for book_id in sorted(quantities):
                    if not await uow.books.decrement_stock_if_sufficient(book_id, quantities[book_id]):
                        raise CommitConflictError(book_id)

        except StorageError as e:
            if e.kind.retryable:
                raise CommitConflictError() from e
            logger.error("Order for user %s rolled back: %s", user_id, e)
            raise TransactionFailedError(e.kind) from e

        return OrderResult(
            transaction_id=order_id,
            total_quantity=validated.total_quantity,
            total_price=validated.total_price,
        )
