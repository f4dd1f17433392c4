# tests/unit/services/test_transaction_service.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from bookstore.core.exceptions import (
    AuthenticationError,
    CommitConflictError,
    InvalidInputError,
    InvalidQuantityError,
)
from bookstore.schemas.transaction import LineItemRequest
from bookstore.services.transaction_service import OrderResult, TransactionService


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [0, -1, 1.5, "abc"])
async def test_create_order_rejects_bad_quantity_before_storage(quantity):
    """
    Invalid quantities must be refused without ever opening a session.
    """
    # 1. Arrange: a session factory that records any use
    session_factory = MagicMock()
    service = TransactionService(session_factory)

    # 2. Act / 3. Assert
    with pytest.raises(InvalidQuantityError) as exc_info:
        await service.create_order("user-1", [{"book_id": "book-1", "quantity": quantity}])

    assert exc_info.value.book_id == "book-1"
    session_factory.assert_not_called()


@pytest.mark.asyncio
async def test_create_order_rejects_empty_items_before_storage():
    session_factory = MagicMock()

    with pytest.raises(InvalidInputError, match="Items are required"):
        await TransactionService(session_factory).create_order("user-1", [])

    session_factory.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", [None, ""])
async def test_create_order_requires_user(user_id):
    session_factory = MagicMock()

    with pytest.raises(AuthenticationError):
        await TransactionService(session_factory).create_order(user_id, [{"book_id": "b", "quantity": 1}])

    session_factory.assert_not_called()


@pytest.mark.asyncio
async def test_create_order_retries_after_lost_race(mocker):
    """A conflict on the first attempt is retried; the second attempt commits."""
    service = TransactionService(MagicMock(), max_attempts=3)
    expected = OrderResult(transaction_id="order-1", total_quantity=2, total_price=20.0)

    mocker.patch.object(service, "_precheck", new_callable=AsyncMock)
    commit = mocker.patch.object(
        service,
        "_commit_order",
        new_callable=AsyncMock,
        side_effect=[CommitConflictError("book-1"), expected],
    )

    result = await service.create_order("user-1", [{"book_id": "book-1", "quantity": "2"}])

    assert result == expected
    assert commit.await_count == 2
    commit.assert_awaited_with("user-1", [LineItemRequest(book_id="book-1", quantity=2)])


@pytest.mark.asyncio
async def test_create_order_surfaces_conflict_after_max_attempts(mocker):
    service = TransactionService(MagicMock(), max_attempts=2)

    mocker.patch.object(service, "_precheck", new_callable=AsyncMock)
    commit = mocker.patch.object(
        service,
        "_commit_order",
        new_callable=AsyncMock,
        side_effect=CommitConflictError("book-1"),
    )

    with pytest.raises(CommitConflictError) as exc_info:
        await service.create_order("user-1", [{"book_id": "book-1", "quantity": 1}])

    assert commit.await_count == 2
    assert exc_info.value.message == "Transaction failed. Stock remains unchanged."


@pytest.mark.asyncio
async def test_precheck_failure_skips_commit(mocker):
    """Errors from the advisory check are raised as-is and nothing is written."""
    from bookstore.core.exceptions import UnknownBooksError

    service = TransactionService(MagicMock())
    mocker.patch.object(service, "_precheck", new_callable=AsyncMock, side_effect=UnknownBooksError(["b"]))
    commit = mocker.patch.object(service, "_commit_order", new_callable=AsyncMock)

    with pytest.raises(UnknownBooksError):
        await service.create_order("user-1", [{"book_id": "b", "quantity": 1}])

    commit.assert_not_awaited()


def test_max_attempts_is_at_least_one():
    assert TransactionService(MagicMock(), max_attempts=0).max_attempts == 1
