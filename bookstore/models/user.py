# bookstore/models/user.py

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from bookstore.database import Base
from bookstore.models._common import created_at_column, new_uuid, updated_at_column


class User(Base):
    """Account owning orders. Credentials are managed by the auth service."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash

    created_at = created_at_column()
    updated_at = updated_at_column()

    orders = relationship("Order", back_populates="user")

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"
