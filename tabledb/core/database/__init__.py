"""
Table-oriented database layer for tabledb.

Structure:
- client.py: ``Database``, the CRUD helper class
- statements.py: SQL text assembly and verb classification
- introspection.py: per-dialect column listing and column filtering
- sanitize.py: bind-parameter normalization and markup stripping
- reporting.py: error reports rendered as text or HTML
- utils.py: engine and URL helpers
- errors.py: exception types
"""

from .client import Database
from .errors import DatabaseConnectionError, DatabaseError
from .reporting import ErrorReport
from .utils import build_url, create_engine

__all__ = [
    "Database",
    "DatabaseConnectionError",
    "DatabaseError",
    "ErrorReport",
    "build_url",
    "create_engine",
]
