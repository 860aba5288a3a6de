"""
SQL statement assembly.

Builds the SELECT/INSERT/UPDATE/DELETE text used by ``Database`` from a table
name, a list of column names and optional WHERE / ORDER BY fragments. Values
are never interpolated: every column gets a named placeholder and the caller
binds the values.

The fragments (``table``, ``where``, ``fields``, ``order_by``) are inserted
verbatim, so they must come from code, never from user input.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

UPDATE_PREFIX = "update_"

ROWS = "rows"
COUNT = "count"
INSERT = "insert"
OTHER = "other"

_VERBS = {
    ROWS: ("select", "describe", "pragma"),
    COUNT: ("delete", "update"),
    INSERT: ("insert",),
}
_VERB_PATTERNS = {
    kind: re.compile(r"^(" + "|".join(verbs) + r")\s", re.IGNORECASE) for kind, verbs in _VERBS.items()
}


def build_select(table: str, where: Optional[str] = "", fields: Optional[str] = "*", order_by: Optional[str] = "") -> str:
    """Build a SELECT statement.

    Args:
        table: Table (or join) expression
        where: Optional WHERE condition without the keyword
        fields: Column list; empty means ``*``
        order_by: Optional ORDER BY list without the keyword

    Returns:
        The statement text terminated with ``;``
    """
    sql = f"SELECT {fields or '*'} FROM {table}"
    if where:
        sql += f" WHERE {where}"
    if order_by:
        sql += f" ORDER BY {order_by}"
    return sql + ";"


def build_insert(table: str, fields: Sequence[str]) -> str:
    """Build a single-row INSERT whose placeholders are the column names."""
    columns = ", ".join(fields)
    placeholders = ", ".join(f":{field}" for field in fields)
    return f"INSERT INTO {table} ({columns}) VALUES ({placeholders});"


def row_param(field: str, index: int) -> str:
    """Name of the placeholder for ``field`` in row ``index`` of a multi-row INSERT."""
    return f"{field}_{index}"


def build_insert_many(table: str, fields: Sequence[str], row_count: int) -> str:
    """Build a multi-row INSERT.

    Each row gets its own set of placeholders (see ``row_param``) so all rows
    can be bound in a single mapping.
    """
    columns = ", ".join(fields)
    rows = []
    for index in range(row_count):
        rows.append("(" + ", ".join(f":{row_param(field, index)}" for field in fields) + ")")
    return f"INSERT INTO {table} ({columns}) VALUES " + ", ".join(rows) + ";"


def build_update(table: str, fields: Sequence[str], where: str) -> str:
    """Build an UPDATE with ``update_``-prefixed SET placeholders.

    The prefix keeps the SET parameters apart from any parameter used in the
    WHERE condition, e.g. ``UPDATE t SET id = :update_id WHERE id = :id``.
    """
    assignments = ", ".join(f"{field} = :{UPDATE_PREFIX}{field}" for field in fields)
    return f"UPDATE {table} SET {assignments} WHERE {where};"


def build_delete(table: str, where: str) -> str:
    return f"DELETE FROM {table} WHERE {where};"


def classify(sql: str) -> str:
    """Classify a statement by its leading SQL verb.

    Returns:
        ``"rows"`` for select/describe/pragma, ``"count"`` for delete/update,
        ``"insert"`` for insert and ``"other"`` for anything else
    """
    sql = sql.strip()
    for kind, pattern in _VERB_PATTERNS.items():
        if pattern.match(sql):
            return kind
    return OTHER
