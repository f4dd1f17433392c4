"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema, ApiResponse

# Transaction schemas
from .transaction import (
    LineItemRequest,
    TransactionCreate,
    TransactionCreated,
    UserSummary,
    BookSummary,
    BookDetail,
    OrderItemRead,
    OrderItemDetailRead,
    OrderRead,
    OrderDetailRead,
    TransactionStatistics,
    coerce_quantity,
)
