from typing import Iterable, Optional

from bookstore.core.enums import StorageErrorKind

# Message promised to clients whenever an order could not be committed
STOCK_UNCHANGED_MESSAGE = "Transaction failed. Stock remains unchanged."


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

class AuthenticationError(BaseServiceError):
    """Raised when a request carries no usable identity."""
    status_code = 401

class TransactionServiceError(BaseServiceError):
    """Base exception for order creation and lookup errors."""
    pass

class InvalidInputError(TransactionServiceError):
    """Raised when the order request is malformed."""
    status_code = 400

class InvalidQuantityError(InvalidInputError):
    """Raised when a line quantity is not a finite positive integer."""

    def __init__(self, book_id):
        super().__init__(f"Quantity for book {book_id} must be a positive integer.")
        self.book_id = book_id

class UnknownBooksError(TransactionServiceError):
    """Raised when requested books do not exist or are soft-deleted."""
    status_code = 404

    def __init__(self, missing_ids: Iterable[str] = ()):
        super().__init__("Some books not found or are inactive.")
        self.missing_ids = sorted(missing_ids)

class InsufficientStockError(TransactionServiceError):
    """Raised when a book cannot cover the requested quantity."""
    status_code = 409

    def __init__(self, book_id: str, title: str, available: int, requested: int):
        super().__init__(
            f"Stock for '{title}' is insufficient. "
            f"Available: {available}, Requested: {requested}."
        )
        self.book_id = book_id
        self.title = title
        self.available = available
        self.requested = requested

class CommitConflictError(TransactionServiceError):
    """Raised when a conditional stock decrement lost a concurrent race."""

    def __init__(self, book_id: Optional[str] = None):
        super().__init__(STOCK_UNCHANGED_MESSAGE)
        self.book_id = book_id

class TransactionFailedError(TransactionServiceError):
    """Raised when the unit of work failed for a storage reason."""

    def __init__(self, kind: StorageErrorKind = StorageErrorKind.UNKNOWN):
        super().__init__(STOCK_UNCHANGED_MESSAGE)
        self.kind = kind

class OrderNotFoundError(TransactionServiceError):
    """Raised when an order is absent or owned by another user."""
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__("Transaction not found or you do not have access")
        self.order_id = order_id

class StorageError(Exception):
    """Exception raised by the stores, classified by kind."""

    def __init__(self, kind: StorageErrorKind, detail: str = ""):
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail
