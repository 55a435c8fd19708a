"""Parameter shape descriptors and type validation.

A shape is one of ``string``, ``array``, ``object``, ``number``, ``date``,
``boolean``, ``undefined`` or ``any``. A parameter declares the tuple of
shapes it accepts; :func:`validate_type` raises when a value matches none.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from datexpr.domain.errors import ShapeValidationError

Shapes = tuple[str, ...]

_CHECKS: dict[str, Callable[[Any], bool]] = {
    "string": lambda v: isinstance(v, str),
    "array": lambda v: isinstance(v, (list, tuple)),
    "object": lambda v: isinstance(v, Mapping),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "date": lambda v: isinstance(v, datetime),
    "undefined": lambda v: v is None,
    "any": lambda v: True,
}

# --- Shapes shared by the date expressions ---

DATE_VALUE: Shapes = ("string", "array")
DATE_FORMAT: Shapes = ("string", "array", "undefined")
DATE_UNIT_VALUE: Shapes = ("string", "array")
DATE_SET_VALUES: Shapes = ("object", "array")
DURATION: Shapes = ("object",)
CONFIG: Shapes = ("object",)
COMPARE_UNIT: Shapes = ("string", "undefined")
ANY: Shapes = ("any",)


def shape_of(value: Any) -> str:
    """Name the first shape *value* matches (``any`` never reported)."""
    for name, check in _CHECKS.items():
        if name != "any" and check(value):
            return name
    return type(value).__name__


def matches(shapes: str | Shapes, value: Any) -> bool:
    """Return True if *value* matches any of *shapes*."""
    if isinstance(shapes, str):
        shapes = (shapes,)
    for shape in shapes:
        check = _CHECKS.get(shape)
        if check is None:
            msg = f"Unknown shape '{shape}'"
            raise ValueError(msg)
        if check(value):
            return True
    return False


def validate_type(shapes: str | Shapes, value: Any, *, label: str = "value") -> Any:
    """Return *value* unchanged, or raise :class:`ShapeValidationError`."""
    expected = (shapes,) if isinstance(shapes, str) else tuple(shapes)
    if not matches(expected, value):
        msg = f"Invalid {label}: expected {'|'.join(expected)}, got {shape_of(value)} ({value!r})"
        raise ShapeValidationError(msg, expected=expected, actual=value)
    return value
