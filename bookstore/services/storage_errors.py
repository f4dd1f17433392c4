"""
Translation of SQLAlchemy / DBAPI failures into ``StorageError`` kinds.

This is the only place that looks at driver-specific error details; the rest
of the application reasons about ``StorageErrorKind`` alone.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import exc as sa_exc

from bookstore.core.enums import StorageErrorKind
from bookstore.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# SQLSTATEs for serialization failure and deadlock
CONFLICT_SQLSTATES = {"40001", "40P01"}


def _sqlstate(error: sa_exc.DBAPIError):
    orig = getattr(error, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify(error: Exception) -> StorageErrorKind:
    if isinstance(error, sa_exc.NoResultFound):
        return StorageErrorKind.NOT_FOUND
    if isinstance(error, sa_exc.DBAPIError) and _sqlstate(error) in CONFLICT_SQLSTATES:
        return StorageErrorKind.CONFLICT
    if isinstance(error, sa_exc.IntegrityError):
        return StorageErrorKind.INTEGRITY
    if isinstance(error, (sa_exc.OperationalError, sa_exc.InterfaceError,
                          sa_exc.DisconnectionError, sa_exc.TimeoutError)):
        return StorageErrorKind.UNAVAILABLE
    return StorageErrorKind.UNKNOWN


@contextmanager
def storage_errors(operation: str):
    """Re-raise SQLAlchemy errors from the wrapped block as ``StorageError``."""
    try:
        yield
    except StorageError:
        raise
    except sa_exc.SQLAlchemyError as e:
        kind = classify(e)
        logger.warning("Storage error during %s: %s (%s)", operation, kind.value, e.__class__.__name__)
        raise StorageError(kind, f"{operation} failed") from e
