"""Test configuration for database unit tests.

Provides a file-backed SQLite ``Database`` with a small ``users`` table and a
callback that records rendered error reports.
"""

from __future__ import annotations

from typing import Generator, List

import pytest

from tabledb.core.database import Database

USERS_SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT UNIQUE,
    bio TEXT,
    age INTEGER
)
"""


@pytest.fixture
def db(tmp_path) -> Generator[Database, None, None]:
    """Database on a fresh SQLite file with an empty ``users`` table."""
    database = Database(f"sqlite:///{tmp_path / 'test.sqlite'}")
    assert database.run(USERS_SCHEMA) is True
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def reports(db: Database) -> List[str]:
    """Messages received by a text-format error callback registered on ``db``."""
    received: List[str] = []
    db.set_error_callback(received.append, "text")
    return received
