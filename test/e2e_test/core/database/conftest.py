"""Fixtures for end-to-end database tests against a real SQLite file."""

from __future__ import annotations

from typing import Generator

import pytest

from tabledb.core.database import Database

SCHEMA = (
    """
    CREATE TABLE authors (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT UNIQUE
    )
    """,
    """
    CREATE TABLE posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        author_id INTEGER NOT NULL REFERENCES authors (id),
        title TEXT NOT NULL,
        body TEXT,
        views INTEGER DEFAULT 0
    )
    """,
)


@pytest.fixture
def blog_db(tmp_path) -> Generator[Database, None, None]:
    """A small blog schema on a fresh SQLite file."""
    db = Database(f"sqlite:///{tmp_path / 'blog.sqlite'}")
    for statement in SCHEMA:
        assert db.run(statement) is True
    try:
        yield db
    finally:
        db.dispose()
