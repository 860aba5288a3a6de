"""tabledb.

Quick CRUD access to relational databases for small web applications,
without hand-writing SQL for the common cases.

``Database`` wraps a SQLAlchemy engine and exposes ``select``, ``insert``,
``update``, ``delete`` and ``run``. Statements are assembled from a table
name, a column -> value mapping and optional WHERE / ORDER BY fragments;
values are always bound as parameters, filtered down to the columns that
exist in the target table and stripped of markup. Driver errors are logged,
rendered as text or HTML for an optional callback, and reported to the
caller as a ``False`` return value.
"""

__version__ = "0.1.0"

from tabledb.core.database import Database, DatabaseConnectionError, DatabaseError, ErrorReport

__all__ = ["Database", "DatabaseConnectionError", "DatabaseError", "ErrorReport", "__version__"]
