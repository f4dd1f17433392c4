# bookstore/models/genre.py

from sqlalchemy import Column, String, TIMESTAMP
from sqlalchemy.orm import relationship

from bookstore.database import Base
from bookstore.models._common import created_at_column, new_uuid, updated_at_column


class Genre(Base):
    __tablename__ = "genres"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String, nullable=False)

    created_at = created_at_column()
    updated_at = updated_at_column()
    deleted_at = Column(TIMESTAMP(timezone=False), nullable=True)

    books = relationship("Book", back_populates="genre")
