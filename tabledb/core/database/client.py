"""
Table-oriented database client.

``Database`` wraps a synchronous SQLAlchemy engine and offers quick CRUD
helpers for small applications::

    db = Database("sqlite:///app.sqlite")
    db.insert("users", {"name": "Ada", "email": "ada@example.com"})
    db.select("users", "name = :name", {"name": "Ada"})
    db.update("users", {"email": "ada@example.org"}, "id = :id", {"id": 1})
    db.delete("users", "id = :id", {"id": 1})

Every helper funnels through ``run``, which cleans the bind parameters,
executes the statement in its own transaction and returns a result shaped by
the statement's verb. Driver errors never escape ``run``: they are logged,
optionally rendered and passed to the error callback, and ``False`` is
returned instead. Callers must therefore compare with ``is False``, since an
empty row list or a zero row count are falsy as well.

Instances remember the last statement, parameters and error, so one instance
must not be shared between threads.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from sqlalchemy import text
from sqlalchemy.engine import URL, Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from tabledb.core.config import ERROR_FORMATS, Settings, get_settings
from tabledb.core.logging_config import get_logger

from . import statements
from .errors import DatabaseConnectionError
from .introspection import column_names, column_query, filter_columns
from .reporting import ErrorReport, render
from .sanitize import Bind, cleanup, normalize
from .utils import build_url, create_engine

logger = get_logger(__name__)

ErrorCallback = Callable[[str], Any]
RunResult = Union[List[Dict[str, Any]], int, bool, None]


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class Database:
    """CRUD helpers over a SQLAlchemy engine.

    Args:
        url: SQLAlchemy database URL (DSN)
        user: User name overriding the one in ``url``
        password: Password overriding the one in ``url``
        options: Keyword arguments for ``sqlalchemy.create_engine``
        strip_tags: Strip markup from string bind parameters

    Raises:
        DatabaseConnectionError: If the engine cannot be created or connected
    """

    def __init__(
        self,
        url: Union[str, URL],
        user: Optional[str] = "",
        password: Optional[str] = "",
        options: Optional[Dict[str, Any]] = None,
        *,
        strip_tags: bool = True,
    ) -> None:
        self.strip_tags = strip_tags
        self._sql = ""
        self._bind: Bind = {}
        self._error = ""
        self._error_callback: Optional[ErrorCallback] = None
        self._error_format = "html"

        display_url = str(url)
        try:
            self._url = build_url(url, user, password)
            display_url = self._url.render_as_string(hide_password=True)
            self._engine: Engine = create_engine(self._url, options)
            with self._engine.connect():
                pass
        except (SQLAlchemyError, ImportError) as e:
            logger.error(f"Database connection failed for {display_url}: {e}")
            raise DatabaseConnectionError(display_url, str(e), driver_error=e) from e
        logger.info(f"Connected to {display_url} ({self.dialect})")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        """Build a client from ``Settings`` (environment / .env by default)."""
        settings = settings or get_settings()
        db = cls(
            settings.database_url,
            settings.database_user,
            settings.database_password,
            strip_tags=settings.strip_tags,
        )
        db._error_format = settings.error_format
        return db

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect(self) -> str:
        """SQLAlchemy dialect name, e.g. ``sqlite``, ``mysql``, ``postgresql``."""
        return self._engine.dialect.name

    @property
    def last_sql(self) -> str:
        return self._sql

    @property
    def last_bind(self) -> Bind:
        return self._bind

    @property
    def last_error(self) -> str:
        return self._error

    @property
    def error_format(self) -> str:
        return self._error_format

    def set_error_callback(self, callback: Optional[ErrorCallback], fmt: str = "html") -> None:
        """Register the function that receives rendered error reports.

        Args:
            callback: Callable taking the rendered message, or None to unregister
            fmt: ``"html"`` or ``"text"``; anything else falls back to html

        Raises:
            TypeError: If ``callback`` is neither callable nor None
        """
        if callback is not None and not callable(callback):
            raise TypeError(f"Error callback must be callable, got {type(callback).__name__}")
        self._error_callback = callback
        fmt = (fmt or "").lower()
        self._error_format = fmt if fmt in ERROR_FORMATS else "html"

    def dispose(self) -> None:
        self._engine.dispose()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        where: Optional[str] = "",
        bind: Any = None,
        fields: Optional[str] = "*",
        order_by: Optional[str] = "",
    ) -> RunResult:
        """Select rows from ``table``.

        Returns:
            List of row dicts, or False on error
        """
        return self.run(statements.build_select(table, where, fields, order_by), bind)

    def insert(
        self,
        table: str,
        info: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        return_row_count: bool = True,
    ) -> RunResult:
        """Insert one row (a mapping) or several rows (a list of mappings).

        Only keys that are columns of ``table`` are inserted. For several rows
        the columns are taken from the first row; a row lacking one of them
        inserts NULL there.

        Args:
            table: Target table
            info: Column -> value mapping, or a list of them
            return_row_count: Return the affected-row count (default) or the
                last inserted id

        Returns:
            Row count or last inserted id, or False on error
        """
        if isinstance(info, Mapping):
            fields = self._filter(table, info)
            if fields is None:
                return False
            if not fields:
                return self._no_columns(table, info)
            sql = statements.build_insert(table, fields)
            bind = {field: info[field] for field in fields}
            return self.run(sql, bind, return_row_count)

        rows = list(info)
        if not rows:
            raise ValueError("insert() needs at least one row")
        fields = self._filter(table, rows[0])
        if fields is None:
            return False
        if not fields:
            return self._no_columns(table, rows[0])
        sql = statements.build_insert_many(table, fields, len(rows))
        bind = {}
        for index, row in enumerate(rows):
            for field in fields:
                bind[statements.row_param(field, index)] = row.get(field)
        return self.run(sql, bind, return_row_count)

    def update(self, table: str, info: Mapping[str, Any], where: str, bind: Any = None) -> RunResult:
        """Update the rows of ``table`` matching ``where`` with the values in ``info``.

        SET values are bound as ``:update_<column>``, so ``where`` may reuse
        the column names for its own parameters.

        Raises:
            TypeError: If ``bind`` holds positional parameters

        Returns:
            Affected-row count, or False on error
        """
        where_bind = normalize(bind)
        if isinstance(where_bind, list):
            if where_bind:
                raise TypeError("update() WHERE parameters must be a mapping of named parameters")
            where_bind = {}

        fields = self._filter(table, info)
        if fields is None:
            return False
        if not fields:
            return self._no_columns(table, info)

        sql = statements.build_update(table, fields, where)
        for field in fields:
            where_bind[f"{statements.UPDATE_PREFIX}{field}"] = info[field]
        return self.run(sql, where_bind)

    def delete(self, table: str, where: str, bind: Any = None) -> RunResult:
        """Delete the rows of ``table`` matching ``where``.

        Returns:
            Affected-row count, or False on error
        """
        return self.run(statements.build_delete(table, where), bind)

    def run(self, sql: str, bind: Any = None, return_row_count: bool = True) -> RunResult:
        """Execute ``sql`` and shape the result by its verb.

        A mapping ``bind`` fills named ``:name`` placeholders; a sequence or a
        single scalar is passed positionally in the driver's own placeholder
        style (``?`` for sqlite, ``%s`` for most others).

        Returns:
            - select/describe/pragma: list of row dicts
            - delete/update: affected-row count
            - insert: affected-row count, or the last inserted id when
              ``return_row_count`` is False
            - anything else: its rows if it returned any, True otherwise
            - False if the driver raised an error
        """
        self._sql = sql.strip()
        self._bind = cleanup(bind, self.strip_tags)
        self._error = ""
        kind = statements.classify(self._sql)
        logger.debug(f"Executing {kind} statement: {self._sql} | bind={self._bind!r}")

        try:
            with self._engine.begin() as conn:
                result = self._execute(conn)
                return self._shape(conn, result, kind, return_row_count)
        except SQLAlchemyError as e:
            self._error = _driver_message(e)
            logger.error(f"SQL error: {self._error} | SQL: {self._sql}")
            self._report()
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _execute(self, conn: Connection) -> CursorResult:
        if isinstance(self._bind, list):
            return conn.exec_driver_sql(self._sql, tuple(self._bind))
        return conn.execute(text(self._sql), self._bind)

    def _shape(self, conn: Connection, result: CursorResult, kind: str, return_row_count: bool) -> RunResult:
        if kind == statements.ROWS:
            # PRAGMA assignments and the like are read verbs without a result set
            if not result.returns_rows:
                return []
            return [dict(row) for row in result.mappings()]
        if kind == statements.COUNT:
            return result.rowcount
        if kind == statements.INSERT:
            return result.rowcount if return_row_count else self._last_insert_id(conn, result)
        if result.returns_rows:
            return [dict(row) for row in result.mappings()]
        return True

    def _last_insert_id(self, conn: Connection, result: CursorResult) -> Any:
        """Id generated by the insert that produced ``result``.

        PostgreSQL drivers leave ``lastrowid`` unset, so the session's
        ``lastval()`` is read on the same connection instead.
        """
        if self.dialect == "postgresql":
            return conn.exec_driver_sql("SELECT lastval()").scalar()
        return result.lastrowid

    def _filter(self, table: str, info: Mapping[str, Any]) -> Optional[List[str]]:
        """Columns of ``table`` present in ``info``, or None if introspection failed."""
        sql, bind, key = column_query(self.dialect, table)
        records = self.run(sql, bind)
        if records is False:
            return None
        return filter_columns(column_names(records, key), info)

    def _no_columns(self, table: str, info: Mapping[str, Any]) -> bool:
        self._sql = ""
        self._bind = {}
        self._error = f"No matching columns in table '{table}' for keys: {', '.join(map(str, info))}"
        logger.warning(self._error)
        self._report()
        return False

    def _report(self) -> None:
        if self._error_callback is None:
            return
        report = ErrorReport.capture(self._error, self._sql, self._bind)
        self._error_callback(render(report, self._error_format))
