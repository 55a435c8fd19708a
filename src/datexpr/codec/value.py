"""Destructuring of date values and format requests.

A date value is one of::

    "2021-02-12T12:34:15.020-03:00"                # ISO string
    ["2021-02-12T12:34:15", {"zone": "utc"}]       # ISO string + options
    [1613144055020, "UnixEpochMs", {"zone": "utc"}] # explicit format tag

INVARIANT: a string in the second position is always a format tag,
never options. Malformed shapes are left for the parser's type checks.
"""

from __future__ import annotations

from typing import Any

from datexpr.domain.formats import DEFAULT_FORMAT


def _at(items: list[Any] | tuple[Any, ...], index: int) -> Any:
    return items[index] if len(items) > index else None


def destructure(value: Any) -> tuple[Any, str, Any]:
    """Normalize a date value into ``(raw, format_tag, options)``."""
    if isinstance(value, (list, tuple)):
        second = _at(value, 1)
        if isinstance(second, str):
            return _at(value, 0), second, _at(value, 2)
        return _at(value, 0), str(DEFAULT_FORMAT), second
    return value, str(DEFAULT_FORMAT), None


def destructure_format(request: Any) -> tuple[Any, Any]:
    """Normalize a format request into ``(format_tag, options)``.

    ``None`` selects the default ``ISO`` format.
    """
    if request is None:
        return str(DEFAULT_FORMAT), None
    if isinstance(request, (list, tuple)):
        tag = _at(request, 0)
        return (str(DEFAULT_FORMAT) if tag is None else tag), _at(request, 1)
    return request, None
