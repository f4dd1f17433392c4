"""
Core module exports.
"""
from .enums import StorageErrorKind, UNKNOWN_GENRE

from .exceptions import (
    BaseServiceError,
    AuthenticationError,
    TransactionServiceError,
    InvalidInputError,
    InvalidQuantityError,
    UnknownBooksError,
    InsufficientStockError,
    CommitConflictError,
    TransactionFailedError,
    OrderNotFoundError,
    StorageError,
)
