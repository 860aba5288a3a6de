"""
Bind-parameter cleanup.

Normalizes whatever the caller passed as bind parameters into the container
the driver expects and strips markup from string values.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

from markupsafe import Markup

Bind = Union[Dict[str, Any], List[Any]]


def strip_markup(value: Any) -> Any:
    """Remove tags and comments from a string value.

    Entities are unescaped and whitespace runs collapse to a single space.
    Anything that is not a string (numbers, ``None``, bytes) is returned as is.
    """
    if isinstance(value, str):
        return str(Markup(value).striptags())
    return value


def normalize(bind: Any) -> Bind:
    """Turn ``bind`` into a dict (named) or list (positional).

    - ``None`` or an empty value gives an empty dict
    - a mapping gives a dict; a leading ``:`` on keys is dropped
    - a list or tuple gives a list
    - any other scalar gives a one-element list
    """
    if bind is None:
        return {}
    if isinstance(bind, Mapping):
        return {str(key).lstrip(":"): value for key, value in bind.items()}
    if isinstance(bind, (list, tuple)):
        return list(bind)
    if isinstance(bind, (str, bytes)) and not bind:
        return {}
    return [bind]


def cleanup(bind: Any, strip_tags: bool = True) -> Bind:
    """Normalize ``bind`` and, when ``strip_tags`` is on, strip markup from its values."""
    bind = normalize(bind)
    if not strip_tags:
        return bind
    if isinstance(bind, dict):
        return {key: strip_markup(value) for key, value in bind.items()}
    return [strip_markup(value) for value in bind]
