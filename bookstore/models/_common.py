# bookstore/models/_common.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, TIMESTAMP


def new_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    # Naive UTC, matching TIMESTAMP(timezone=False) columns
    return datetime.now(timezone.utc).replace(tzinfo=None)


def created_at_column() -> Column:
    return Column(TIMESTAMP(timezone=False), default=utc_now, nullable=False, index=True)


def updated_at_column() -> Column:
    return Column(TIMESTAMP(timezone=False), default=utc_now, onupdate=utc_now, nullable=False)
