"""
Book catalog model.

Stock lives in ``stock_quantity``. Order creation is the only code path that
lowers it, through ``CatalogStore.decrement_stock_if_sufficient``; the check
constraint backs that up at the database level.
"""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship

from bookstore.database import Base
from bookstore.models._common import created_at_column, new_uuid, updated_at_column


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_books_stock_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String, unique=True, nullable=False)
    writer = Column(String, nullable=False)
    publisher = Column(String, nullable=False)
    publication_year = Column(Integer, nullable=True)
    description = Column(String, nullable=True)

    # Pricing and stock
    price = Column(Float, nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)

    genre_id = Column(String(36), ForeignKey("genres.id"), nullable=True, index=True)

    created_at = created_at_column()
    updated_at = updated_at_column()
    deleted_at = Column(TIMESTAMP(timezone=False), nullable=True, index=True)

    genre = relationship("Genre", back_populates="books")
    order_items = relationship("OrderItem", back_populates="book")
