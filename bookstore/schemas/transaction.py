"""
Schemas for order (transaction) requests and responses.

Request bodies are parsed strictly: each line becomes a ``LineItemRequest``
with an integer quantity, and all quantity coercion goes through
``coerce_quantity``.
"""
import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from bookstore.core.exceptions import InvalidInputError, InvalidQuantityError
from .base import BaseSchema

# Plain ASCII decimal, optionally signed, with an optional exponent
_NUMERIC_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def coerce_quantity(value: Any) -> Optional[int]:
    """
    Coerce a requested quantity to a positive integer.

    Accepts ints, integral floats (2.0) and numeric strings ("3", " 4 ", "5.0").
    Returns None for anything else: booleans, zero, negatives, fractions,
    NaN/infinity, non-numeric strings (including digit separators and
    non-ASCII digits), missing values.
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_TEXT.fullmatch(text):
            return None
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None

    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        value = int(value)

    if not isinstance(value, int) or value <= 0:
        return None
    return value


def check_line_item(data: Any) -> dict:
    """Validate one raw line item, returning ``{"book_id", "quantity"}``."""
    if not isinstance(data, Mapping):
        raise InvalidInputError("Each item must be an object with book_id and quantity.")

    book_id = data.get("book_id")
    if not isinstance(book_id, str) or not book_id.strip():
        raise InvalidInputError("Each item requires a book_id.")

    quantity = coerce_quantity(data.get("quantity"))
    if quantity is None:
        raise InvalidQuantityError(book_id)

    return {"book_id": book_id.strip(), "quantity": quantity}


class LineItemRequest(BaseSchema):
    """One requested book and quantity"""
    model_config = ConfigDict(frozen=True)

    book_id: str
    quantity: int

    @model_validator(mode="before")
    @classmethod
    def _check(cls, data: Any) -> Any:
        if isinstance(data, LineItemRequest):
            return data
        try:
            return check_line_item(data)
        except InvalidInputError as e:
            raise ValueError(e.message) from e


class TransactionCreate(BaseSchema):
    items: List[LineItemRequest] = Field(default=None, validate_default=True)

    @field_validator("items", mode="before")
    @classmethod
    def _require_items(cls, value: Any) -> Any:
        if not value or not isinstance(value, list):
            raise ValueError("Items are required")
        return value


class TransactionCreated(BaseSchema):
    transaction_id: str
    total_quantity: int
    total_price: float


class UserSummary(BaseSchema):
    id: str
    username: str
    email: str


class BookSummary(BaseSchema):
    title: str
    price: float


class BookDetail(BookSummary):
    writer: str
    publisher: str


class OrderItemRead(BaseSchema):
    id: int
    order_id: str
    book_id: str
    quantity: int
    book: BookSummary


class OrderItemDetailRead(OrderItemRead):
    book: BookDetail


class OrderRead(BaseSchema):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    order_items: List[OrderItemRead]
    total_quantity: int
    total_price: float


class OrderDetailRead(OrderRead):
    order_items: List[OrderItemDetailRead]


class TransactionStatistics(BaseSchema):
    total_transactions: int
    average_transaction_amount: float
    most_book_sales_genre: Optional[str] = None
    fewest_book_sales_genre: Optional[str] = None
