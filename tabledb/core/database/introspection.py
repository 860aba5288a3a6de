"""
Table column introspection.

``insert`` and ``update`` only bind the columns that actually exist in the
target table. The column list is read with a dialect-specific query:

- SQLite: ``PRAGMA table_info``
- MySQL / MariaDB: ``DESCRIBE``
- everything else: ``information_schema.columns``
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Tuple

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")

MYSQL_DIALECTS = ("mysql", "mariadb")


def safe_table_name(name: str) -> str:
    """Return ``name`` if it is a plain or schema-qualified identifier.

    Raises:
        ValueError: If the name could break out of the introspection query
    """
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Unsafe table name: {name!r}")
    return name


def column_query(dialect: str, table: str) -> Tuple[str, Dict[str, Any], str]:
    """Build the query listing the columns of ``table``.

    Args:
        dialect: SQLAlchemy dialect name (``engine.dialect.name``)
        table: Table name

    Returns:
        Tuple of (sql, bind parameters, result key holding the column name)
    """
    table = safe_table_name(table)
    schema, _, name = table.rpartition(".")
    if dialect == "sqlite":
        prefix = f"{schema}." if schema else ""
        return f"PRAGMA {prefix}table_info('{name}');", {}, "name"
    if dialect in MYSQL_DIALECTS:
        return f"DESCRIBE {table};", {}, "Field"

    sql = "SELECT column_name FROM information_schema.columns WHERE table_name = :table_name"
    bind: Dict[str, Any] = {"table_name": name}
    if schema:
        sql += " AND table_schema = :table_schema"
        bind["table_schema"] = schema
    return sql + " ORDER BY ordinal_position;", bind, "column_name"


def column_names(records: Iterable[Mapping[str, Any]], key: str) -> List[str]:
    """Extract the column names from introspection rows.

    Some drivers return information_schema headers upper-cased, so the key
    lookup falls back to a case-insensitive match.
    """
    names = []
    for record in records:
        if key in record:
            names.append(record[key])
            continue
        for record_key, value in record.items():
            if str(record_key).lower() == key.lower():
                names.append(value)
                break
    return names


def filter_columns(columns: Iterable[str], info: Mapping[str, Any]) -> List[str]:
    """Keep the table columns that appear in ``info``, in table order."""
    return [column for column in columns if column in info]
