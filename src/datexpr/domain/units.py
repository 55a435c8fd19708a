"""Calendar units, settable fields, and duration normalization."""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

from datexpr.domain.errors import InvalidDurationError, InvalidUnitError


class CalendarUnit(StrEnum):
    """Granularities for start-of, end-of and same-unit comparisons."""

    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


# --- Settable fields (PlainObject / $dateSet) ---

GREGORIAN_FIELDS: tuple[str, ...] = ("year", "month", "day")
WEEK_FIELDS: tuple[str, ...] = ("weekYear", "weekNumber", "weekday")
ORDINAL_FIELDS: tuple[str, ...] = ("year", "ordinal")
TIME_FIELDS: tuple[str, ...] = ("hour", "minute", "second", "millisecond")

_FIELD_ALIASES: dict[str, str] = {
    "year": "year",
    "years": "year",
    "month": "month",
    "months": "month",
    "day": "day",
    "days": "day",
    "ordinal": "ordinal",
    "weekyear": "weekYear",
    "weekyears": "weekYear",
    "weeknumber": "weekNumber",
    "weeknumbers": "weekNumber",
    "weekday": "weekday",
    "weekdays": "weekday",
    "hour": "hour",
    "hours": "hour",
    "minute": "minute",
    "minutes": "minute",
    "second": "second",
    "seconds": "second",
    "millisecond": "millisecond",
    "milliseconds": "millisecond",
}


def _require_number(value: Any, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"{label} must be a number, got {type(value).__name__}"
        raise InvalidDurationError(msg)
    if isinstance(value, float) and not math.isfinite(value):
        msg = f"{label} must be finite, got {value!r}"
        raise InvalidDurationError(msg)


def normalize_unit(unit: Any) -> CalendarUnit:
    """Map ``"months"`` / ``"Month"`` / ``"month"`` to :class:`CalendarUnit`."""
    if not isinstance(unit, str):
        raise InvalidUnitError(unit)
    key = unit.lower()
    if key.endswith("s") and key[:-1] in CalendarUnit._value2member_map_:
        key = key[:-1]
    try:
        return CalendarUnit(key)
    except ValueError:
        raise InvalidUnitError(unit) from None


def normalize_fields(values: dict[str, Any]) -> dict[str, int]:
    """Canonicalize a field mapping; unknown keys raise :class:`InvalidUnitError`.

    ``None`` values are dropped, matching an omitted key.
    """
    fields: dict[str, int] = {}
    for key, value in values.items():
        canonical = _FIELD_ALIASES.get(str(key).lower())
        if canonical is None:
            raise InvalidUnitError(key)
        if value is None:
            continue
        _require_number(value, f"Field '{key}'")
        fields[canonical] = int(value)
    return fields


def normalize_duration(duration: dict[str, Any]) -> dict[str, float]:
    """Canonicalize a duration to plural unit keys.

    Accepts ``{"month": 1}`` as well as ``{"months": 1}``. Values must be
    numbers; years, quarters and months must be whole.
    """
    normalized: dict[str, float] = {}
    for key, amount in duration.items():
        unit = normalize_unit(key)
        plural = f"{unit.value}s"
        _require_number(amount, f"Duration amount for '{key}'")
        whole = not isinstance(amount, float) or amount.is_integer()
        if plural in {"years", "quarters", "months"} and not whole:
            msg = f"Non-integer {plural} are ambiguous: {amount!r}"
            raise InvalidDurationError(msg)
        normalized[plural] = normalized.get(plural, 0) + amount
    return normalized
