"""Encoders: :class:`CalendarInstant` into external representations.

Encoders never raise for invalid instants. Each renders a format-specific
invalid value instead: ``None`` for strings and datetimes, ``nan`` for
numbers, ``{}`` for objects and ``"Invalid DateTime"`` for token patterns.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, datetime, tzinfo
from typing import Any

from datexpr.calendar.instant import CalendarInstant
from datexpr.calendar.tokens import INVALID_RENDERING, format_pattern
from datexpr.calendar.zones import format_offset, is_offset_fixed, offset_minutes, zone_name


def _options(options: Any) -> Mapping[str, Any]:
    return options if isinstance(options, Mapping) else {}


def _tech_offset(moment: datetime, zone: tzinfo, *, extended: bool = True) -> str:
    """``Z`` for a fixed zero offset, else ``+HH:MM`` (``+HHMM`` when basic)."""
    minutes = offset_minutes(moment)
    if minutes == 0 and is_offset_fixed(zone):
        return "Z"
    return format_offset(minutes, "techie" if extended else "short")


def _iso_date(moment: datetime, *, extended: bool = True) -> str:
    sep = "-" if extended else ""
    return f"{moment.year:04d}{sep}{moment.month:02d}{sep}{moment.day:02d}"


def _iso_time(moment: datetime, zone: tzinfo, opts: Mapping[str, Any]) -> str:
    extended = opts.get("format", "extended") != "basic"
    sep = ":" if extended else ""
    millis = moment.microsecond // 1000
    text = f"{moment.hour:02d}{sep}{moment.minute:02d}"
    if not (opts.get("suppressSeconds") and moment.second == 0 and millis == 0):
        text += f"{sep}{moment.second:02d}"
        if not (opts.get("suppressMilliseconds") and millis == 0):
            text += f".{millis:03d}"
    if opts.get("includeOffset", True):
        text += _tech_offset(moment, zone, extended=extended)
    return text


def _parts(instant: CalendarInstant) -> tuple[datetime, tzinfo] | None:
    if instant.moment is None or instant.zone is None:
        return None
    return instant.moment, instant.zone


# ---------------------------------------------------------------------------
# ISO 8601
# ---------------------------------------------------------------------------


def encode_iso(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    moment, zone = parts
    opts = _options(options)
    extended = opts.get("format", "extended") != "basic"
    return f"{_iso_date(moment, extended=extended)}T{_iso_time(moment, zone, opts)}"


def encode_iso_date(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return _iso_date(parts[0], extended=_options(options).get("format", "extended") != "basic")


def encode_iso_week_date(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return format_pattern(parts[0], parts[1], "kkkk-'W'WW-c")


def encode_iso_time(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return _iso_time(parts[0], parts[1], _options(options))


# ---------------------------------------------------------------------------
# RFC 2822 / HTTP
# ---------------------------------------------------------------------------


def encode_rfc2822(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return format_pattern(parts[0], parts[1], "EEE, dd LLL yyyy HH:mm:ss ZZZ")


def encode_http(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return format_pattern(parts[0].astimezone(UTC), UTC, "EEE, dd LLL yyyy HH:mm:ss 'GMT'")


# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------


def _sql_time(moment: datetime, zone: tzinfo, opts: Mapping[str, Any]) -> str:
    millis = moment.microsecond // 1000
    text = f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}.{millis:03d}"
    if opts.get("includeZone"):
        text += f" {zone_name(zone, moment)}"
    elif opts.get("includeOffset", True):
        text += f" {_tech_offset(moment, zone)}"
    return text


def encode_sql(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    moment, zone = parts
    return f"{_iso_date(moment)} {_sql_time(moment, zone, _options(options))}"


def encode_sql_date(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    return None if parts is None else _iso_date(parts[0])


def encode_sql_time(instant: CalendarInstant, options: Any) -> str | None:
    parts = _parts(instant)
    if parts is None:
        return None
    return _sql_time(parts[0], parts[1], _options(options))


# ---------------------------------------------------------------------------
# Numbers, native datetimes, objects
# ---------------------------------------------------------------------------


def encode_epoch_ms(instant: CalendarInstant, options: Any) -> int | float:
    millis = instant.to_millis()
    return math.nan if millis is None else millis


def encode_epoch_s(instant: CalendarInstant, options: Any) -> float:
    millis = instant.to_millis()
    return math.nan if millis is None else millis / 1000


def encode_native(instant: CalendarInstant, options: Any) -> datetime | None:
    return instant.moment


def encode_plain_object(instant: CalendarInstant, options: Any) -> dict[str, Any]:
    parts = _parts(instant)
    if parts is None:
        return {}
    moment, zone = parts
    result: dict[str, Any] = {
        "year": moment.year,
        "month": moment.month,
        "day": moment.day,
        "hour": moment.hour,
        "minute": moment.minute,
        "second": moment.second,
        "millisecond": moment.microsecond // 1000,
    }
    if _options(options).get("includeConfig"):
        result.update(
            zone=zone_name(zone, moment),
            locale=instant.get("locale"),
            numberingSystem=instant.get("numberingSystem"),
            outputCalendar=instant.get("outputCalendar"),
        )
    return result


def encode_instant(instant: CalendarInstant, options: Any) -> CalendarInstant:
    return instant


def encode_property(instant: CalendarInstant, options: Any) -> Any:
    """Read one property; *options* is the property name."""
    return instant.get(options)


# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------


def encode_pattern(instant: CalendarInstant, pattern: str) -> str:
    parts = _parts(instant)
    if parts is None:
        return INVALID_RENDERING
    return format_pattern(parts[0], parts[1], pattern)
