"""Error types for the table database layer.

Driver failures raised while executing a statement are caught and reported by
``Database.run``; the exceptions below cover the failures that cannot be
turned into a ``False`` return value.
"""

from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """Base error for all tabledb exceptions."""


class DatabaseConnectionError(DatabaseError):
    """Raised when the engine cannot be created or the first connection fails.

    Args:
        url: Database URL with the password masked.
        message: Driver message describing the failure.
    """

    def __init__(self, url: str, message: str, *, driver_error: Optional[BaseException] = None) -> None:
        super().__init__(f"Could not connect to '{url}': {message}")
        self.url = url
        self.driver_error = driver_error
