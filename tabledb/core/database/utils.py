"""
Database utility functions for engine creation.

This module provides the helpers ``Database`` uses to turn a DSN plus optional
credentials into a configured synchronous SQLAlchemy engine.

Functions:
- normalize_url: Rewrites legacy URL schemes to the ones SQLAlchemy accepts
- build_url: Applies user/password overrides to a DSN
- create_engine: Creates the SQLAlchemy engine with safe defaults
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import StaticPool

DEFAULT_ENGINE_OPTIONS: Dict[str, Any] = {"pool_pre_ping": True}


def normalize_url(db_url: str) -> str:
    """Rewrite ``postgres://`` (as found in many hosting env vars) to ``postgresql://``.

    Args:
        db_url: Database connection URL

    Returns:
        URL SQLAlchemy can resolve to a dialect
    """
    return re.sub(r"^postgres://", "postgresql://", db_url.strip(), count=1)


def build_url(db_url: str | URL, user: Optional[str] = "", password: Optional[str] = "") -> URL:
    """Parse ``db_url`` and apply the credentials that were given explicitly.

    Args:
        db_url: Database connection URL or ``URL`` instance
        user: User name overriding the one in the URL, if non-empty
        password: Password overriding the one in the URL, if non-empty

    Returns:
        The resulting ``URL``
    """
    url = make_url(normalize_url(db_url) if isinstance(db_url, str) else db_url)
    if user:
        url = url.set(username=user)
    if password:
        url = url.set(password=password)
    return url


def _is_sqlite_memory(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def create_engine(url: URL, options: Optional[Dict[str, Any]] = None) -> Engine:
    """Create a synchronous SQLAlchemy engine.

    In-memory SQLite databases share a single connection, otherwise every
    checkout would see a fresh, empty database.

    Args:
        url: Parsed database URL
        options: Keyword arguments for ``sqlalchemy.create_engine``; replaces
            the defaults when given

    Returns:
        Configured Engine instance
    """
    kwargs = dict(DEFAULT_ENGINE_OPTIONS if options is None else options)
    if _is_sqlite_memory(url):
        kwargs.setdefault("poolclass", StaticPool)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return sa_create_engine(url, **kwargs)
