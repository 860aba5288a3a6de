"""
SQL error reports.

When a statement fails, ``Database`` captures an ``ErrorReport`` (driver
message, offending SQL, bind values and the caller's location) and renders it
as plain text or as an HTML fragment before handing it to the registered
error callback.
"""

from __future__ import annotations

import pprint
import traceback
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple

from markupsafe import escape
from pydantic import BaseModel, Field


_PACKAGE_DIR = Path(__file__).resolve().parents[2]

TEXT_RULE = "-" * 50


class ErrorReport(BaseModel):
    """Everything known about one failed statement."""

    error: str = Field(description="Driver error message")
    sql: Optional[str] = Field(default=None, description="Statement that failed")
    bind: Optional[str] = Field(default=None, description="Pretty-printed bind parameters")
    location: Optional[str] = Field(default=None, description="Caller file and line")

    @classmethod
    def capture(cls, error: str, sql: Optional[str] = None, bind: Any = None) -> "ErrorReport":
        """Build a report for the current call site."""
        return cls(
            error=error,
            sql=sql or None,
            bind=format_bind(bind),
            location=caller_location(),
        )

    def as_sections(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(label, value)`` for every section that is set."""
        yield "Error", self.error
        if self.sql:
            yield "SQL Statement", self.sql
        if self.bind:
            yield "Bind Parameters", self.bind
        if self.location:
            yield "Backtrace", self.location


def format_bind(bind: Any) -> Optional[str]:
    if not bind:
        return None
    return pprint.pformat(bind, sort_dicts=False).strip()


def caller_location() -> Optional[str]:
    """Location of the nearest frame outside the tabledb package.

    Returns:
        ``"<file> at line <n>"`` or None when the whole stack is inside tabledb
    """
    for frame in reversed(traceback.extract_stack()):
        try:
            Path(frame.filename).resolve().relative_to(_PACKAGE_DIR)
        except ValueError:
            return f"{frame.filename} at line {frame.lineno}"
    return None


@lru_cache(maxsize=1)
def error_css() -> str:
    return resources.files("tabledb.core.database").joinpath("error.css").read_text(encoding="utf-8").strip()


def render_text(report: ErrorReport) -> str:
    msg = "SQL Error\n" + TEXT_RULE
    for label, value in report.as_sections():
        msg += f"\n\n{label}:\n{value}"
    return msg


def render_html(report: ErrorReport) -> str:
    msg = '<style type="text/css">\n' + error_css() + "\n</style>"
    msg += '\n<div class="db-error">\n\t<h3>SQL Error</h3>'
    for label, value in report.as_sections():
        value = escape(value)
        if label == "Bind Parameters":
            value = f"<pre>{value}</pre>"
        msg += f"\n\t<label>{label}:</label>{value}"
    return msg + "\n</div>"


def render(report: ErrorReport, fmt: str = "html") -> str:
    """Render ``report`` as ``"text"`` or ``"html"`` (anything else means html)."""
    if fmt == "text":
        return render_text(report)
    return render_html(report)
