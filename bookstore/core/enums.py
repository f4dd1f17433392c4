"""
Shared enums and constants used across the application.
"""

from enum import Enum

# Bucket used by the statistics for books without a genre
UNKNOWN_GENRE = "Unknown Genre"


class StorageErrorKind(str, Enum):
    """Persistence failure categories reported by the store collaborators"""
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"        # Lost a concurrent update, safe to retry
    INTEGRITY = "INTEGRITY"      # Constraint violation
    UNAVAILABLE = "UNAVAILABLE"  # Connection, lock timeout or pool exhaustion
    UNKNOWN = "UNKNOWN"

    @property
    def retryable(self) -> bool:
        return self in (StorageErrorKind.CONFLICT,)
