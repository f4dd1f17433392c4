# bookstore/models/order.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bookstore.database import Base
from bookstore.models._common import created_at_column, new_uuid, updated_at_column


class Order(Base):
    """A committed purchase. Created together with its items and never mutated."""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    user = relationship("User", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.order_items)

    @property
    def total_price(self) -> float:
        return sum(item.subtotal for item in self.order_items)

    def __repr__(self) -> str:
        return f"<Order id={self.id} user={self.user_id} items={len(self.order_items)}>"


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    book_id = Column(String(36), ForeignKey("books.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)

    created_at = created_at_column()

    order = relationship("Order", back_populates="order_items")
    book = relationship("Book", back_populates="order_items")

    @property
    def subtotal(self) -> float:
        # Priced at the book's current price
        return self.book.price * self.quantity
