from .user import User
from .genre import Genre
from .book import Book
from .order import Order, OrderItem

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'User',
    'Genre',
    'Book',
    'Order',
    'OrderItem',
]
