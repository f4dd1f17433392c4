"""
Purpose: Checks a requested set of order lines against a stock/price snapshot.

Role: First stage of order creation. It never writes; the transaction service
runs it once on a plain read for an early answer and again inside the unit of
work that performs the stock decrements.

- parse_line_items(): turns raw request items into ``LineItemRequest`` objects,
  rejecting bad input before any storage access
- check_inventory(): pure check of merged lines against a snapshot
- InventoryValidator: fetches the snapshot from a ``CatalogStore`` and checks it
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from bookstore.core.exceptions import InsufficientStockError, InvalidInputError, UnknownBooksError
from bookstore.schemas.transaction import LineItemRequest, check_line_item
from bookstore.services.catalog_store import BookSnapshot, CatalogStore


@dataclass(frozen=True)
class ValidatedLine:
    book_id: str
    quantity: int
    unit_price: float


@dataclass(frozen=True)
class ValidatedOrder:
    lines: Tuple[ValidatedLine, ...]
    total_quantity: int
    total_price: float
    remaining_stock: Dict[str, int]  # book id -> stock after the order


def parse_line_items(items: Any) -> List[LineItemRequest]:
    """Parse raw items (mappings or ``LineItemRequest``) into typed line items."""
    if not items or not isinstance(items, (list, tuple)):
        raise InvalidInputError("Items are required")

    parsed = []
    for item in items:
        if isinstance(item, LineItemRequest):
            parsed.append(item)
        else:
            parsed.append(LineItemRequest(**check_line_item(item)))
    return parsed


def merge_line_items(items: Iterable[LineItemRequest]) -> List[LineItemRequest]:
    """Collapse lines for the same book into one, keeping first-seen order."""
    quantities: Dict[str, int] = {}
    for item in items:
        quantities[item.book_id] = quantities.get(item.book_id, 0) + item.quantity
    return [LineItemRequest(book_id=book_id, quantity=qty) for book_id, qty in quantities.items()]


def check_inventory(items: Sequence[LineItemRequest], snapshot: Iterable[BookSnapshot]) -> ValidatedOrder:
    """
    Check merged line items against a snapshot of active books.

    Raises:
        UnknownBooksError: if any requested book is missing from the snapshot
        InsufficientStockError: for the first line the snapshot cannot cover
    """
    books = {book.id: book for book in snapshot if book.is_active}
    requested_ids = {item.book_id for item in items}

    if len(books.keys() & requested_ids) != len(requested_ids):
        raise UnknownBooksError(requested_ids - books.keys())

    lines = []
    total_quantity = 0
    total_price = 0.0
    remaining_stock = {}

    for item in items:
        book = books[item.book_id]
        if book.stock_quantity < item.quantity:
            raise InsufficientStockError(book.id, book.title, book.stock_quantity, item.quantity)

        lines.append(ValidatedLine(book_id=book.id, quantity=item.quantity, unit_price=book.price))
        total_quantity += item.quantity
        total_price += book.price * item.quantity
        remaining_stock[book.id] = book.stock_quantity - item.quantity

    return ValidatedOrder(
        lines=tuple(lines),
        total_quantity=total_quantity,
        total_price=total_price,
        remaining_stock=remaining_stock,
    )


class InventoryValidator:
    def __init__(self, catalog: CatalogStore):
        self.catalog = catalog

    async def validate(self, items: Sequence[LineItemRequest]) -> ValidatedOrder:
        """Fetch a snapshot for the requested books and check the merged lines against it."""
        merged = merge_line_items(items)
        snapshot = await self.catalog.find_books_by_ids([item.book_id for item in merged])
        return check_inventory(merged, snapshot)
