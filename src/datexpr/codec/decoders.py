"""Decoders: external representations into :class:`CalendarInstant`.

Every decoder first checks the raw value's type against its format and
raises :class:`ShapeValidationError` on a mismatch. Once the type is right,
content that does not parse is NOT an error: it becomes an invalid instant.
Keep the two policies separate; ``$dateIsValid`` and the round-trip
guarantees depend on the distinction.

Decode options (a mapping, anything else is ignored):
    zone: Zone the result is projected onto (default ``local``). Values
        without an explicit offset are read as wall time in this zone.
    setZone: Keep the offset written in the input as the result's zone.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from email.utils import parsedate_to_datetime
from typing import Any

from dateutil.parser import isoparse

from datexpr.calendar.instant import UNPARSABLE, UNSUPPORTED_ZONE, CalendarInstant
from datexpr.calendar.tokens import parse_pattern
from datexpr.calendar.zones import fixed_offset_zone, offset_minutes, resolve_zone
from datexpr.domain.errors import ShapeValidationError
from datexpr.domain.shapes import validate_type

logger = logging.getLogger(__name__)

_ORDINAL_DATE = re.compile(r"^(\d{4})-?(\d{3})(?:T(.+))?$")
_ISO_TIME = re.compile(
    r"^T?(\d{2})(?::?(\d{2})(?::?(\d{2})(?:[.,](\d{1,9}))?)?)?"
    r"(Z|[+-]\d{2}(?::?\d{2})?)?$",
    re.IGNORECASE,
)
_SQL = re.compile(
    r"^(?:(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2}))?"
    r"(?:(?(year) )(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?)?"
    r"(?: ?(?P<zone>Z|[+-]\d{2}(?::?\d{2})?|[A-Za-z_]+(?:/[A-Za-z0-9_+\-]+)*))?$"
)
_HTTP_FORMATS = (
    "%a, %d %b %Y %H:%M:%S GMT",  # IMF-fixdate
    "%A, %d-%b-%y %H:%M:%S GMT",  # RFC 850
    "%a %b %d %H:%M:%S %Y",  # asctime
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _options(options: Any) -> Mapping[str, Any]:
    return options if isinstance(options, Mapping) else {}


def _unparsable(raw: Any, tag: str) -> CalendarInstant:
    logger.debug("Unparseable %s value %r", tag, raw)
    return CalendarInstant.invalid(UNPARSABLE, f"the input {raw!r} can't be parsed as {tag}")


def _project(
    moment: datetime, options: Mapping[str, Any], written_zone: tzinfo | None = None
) -> CalendarInstant:
    """Place a parsed datetime in the target zone, honoring ``setZone``.

    With ``setZone`` the zone written in the input wins: *written_zone* when
    the input named one, else the fixed offset it carried.
    """
    if moment.tzinfo is not None and options.get("setZone"):
        return CalendarInstant.from_datetime(
            moment, written_zone or fixed_offset_zone(offset_minutes(moment))
        )
    return CalendarInstant.from_datetime(moment, options.get("zone"))


def _fraction_to_micros(fraction: str | None) -> int:
    if not fraction:
        return 0
    return int(fraction[:3].ljust(3, "0")) * 1000


def _offset_zone(text: str) -> Any:
    if text.upper() == "Z":
        return UTC
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    minutes = int(digits[:2]) * 60 + int(digits[2:] or 0)
    return fixed_offset_zone(sign * minutes)


def _today_at(clock: time, zone: Any) -> datetime:
    today = datetime.now(zone).date()
    return datetime.combine(today, clock.replace(tzinfo=None)).replace(tzinfo=zone)


# ---------------------------------------------------------------------------
# ISO 8601
# ---------------------------------------------------------------------------


def _parse_iso_text(text: str, options: Mapping[str, Any]) -> datetime:
    """Parse any supported ISO-8601 form; ValueError if none matches."""
    if not text or any(ch.isspace() for ch in text):
        msg = "whitespace or empty input"
        raise ValueError(msg)
    try:
        return isoparse(text)
    except (OverflowError, ValueError):
        pass

    ordinal = _ORDINAL_DATE.match(text)
    if ordinal:
        year, day_of_year, clock = ordinal.groups()
        day = date(int(year), 1, 1) + timedelta(days=int(day_of_year) - 1)
        if day.year != int(year) or int(day_of_year) < 1:
            msg = f"ordinal {day_of_year} out of range"
            raise ValueError(msg)
        if clock:
            return isoparse(f"{day.isoformat()}T{clock}")
        return datetime.combine(day, time())

    # A bare time needs a designator or separators; "2021-13" is not 20:21-13:00
    clock_match = _ISO_TIME.match(text)
    if clock_match and (text[0] in "Tt" or ":" in text):
        hour, minute, second, fraction, offset = clock_match.groups()
        clock = time(
            int(hour), int(minute or 0), int(second or 0), _fraction_to_micros(fraction)
        )
        zone = _offset_zone(offset) if offset else resolve_zone(options.get("zone"))
        if zone is None:
            msg = "unsupported zone"
            raise ValueError(msg)
        moment = _today_at(clock, zone)
        return moment if offset else moment.replace(tzinfo=None)

    msg = f"{text!r} is not ISO 8601"
    raise ValueError(msg)


def decode_iso(raw: Any, options: Any) -> CalendarInstant:
    """ISO, ISODate, ISOWeekDate and ISOTime all accept the full ISO grammar."""
    validate_type("string", raw, label="ISO date")
    opts = _options(options)
    try:
        moment = _parse_iso_text(raw, opts)
    except (OverflowError, ValueError):
        return _unparsable(raw, "ISO 8601")
    return _project(moment, opts)


# ---------------------------------------------------------------------------
# RFC 2822 / HTTP
# ---------------------------------------------------------------------------


def decode_rfc2822(raw: Any, options: Any) -> CalendarInstant:
    validate_type("string", raw, label="RFC 2822 date")
    try:
        moment = parsedate_to_datetime(raw)
    except (IndexError, TypeError, ValueError):
        return _unparsable(raw, "RFC 2822")
    if moment.tzinfo is None:
        # "-0000": UTC with no local offset information
        moment = moment.replace(tzinfo=UTC)
    return _project(moment, _options(options))


def decode_http(raw: Any, options: Any) -> CalendarInstant:
    validate_type("string", raw, label="HTTP date")
    for fmt in _HTTP_FORMATS:
        try:
            moment = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return _project(moment.replace(tzinfo=UTC), _options(options))
    return _unparsable(raw, "HTTP")


# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------


def decode_sql(raw: Any, options: Any) -> CalendarInstant:
    validate_type("string", raw, label="SQL date")
    opts = _options(options)
    match = _SQL.match(raw)
    if match is None or (match["year"] is None and match["hour"] is None):
        return _unparsable(raw, "SQL")

    zone_text = match["zone"]
    if zone_text is None:
        zone = None
    elif zone_text.upper() == "Z" or zone_text[0] in "+-":
        zone = _offset_zone(zone_text)
    else:
        zone = resolve_zone(zone_text)
        if zone is None:
            msg = f"the zone {zone_text!r} is not supported"
            return CalendarInstant.invalid(UNSUPPORTED_ZONE, msg)

    try:
        clock = time(
            int(match["hour"] or 0),
            int(match["minute"] or 0),
            int(match["second"] or 0),
            _fraction_to_micros(match["fraction"]),
        )
        if match["year"] is not None:
            day = date(int(match["year"]), int(match["month"]), int(match["day"]))
        else:
            day = datetime.now(zone or resolve_zone(opts.get("zone")) or UTC).date()
    except ValueError:
        return _unparsable(raw, "SQL")

    moment = datetime.combine(day, clock)
    if zone is not None:
        moment = moment.replace(tzinfo=zone)
    return _project(moment, opts, zone)


# ---------------------------------------------------------------------------
# Numbers, native datetimes, objects
# ---------------------------------------------------------------------------


def decode_epoch_ms(raw: Any, options: Any) -> CalendarInstant:
    validate_type("number", raw, label="UnixEpochMs value")
    return CalendarInstant.from_millis(raw, _options(options).get("zone"))


def decode_epoch_s(raw: Any, options: Any) -> CalendarInstant:
    validate_type("number", raw, label="UnixEpochS value")
    return CalendarInstant.from_millis(raw * 1000, _options(options).get("zone"))


def decode_native(raw: Any, options: Any) -> CalendarInstant:
    validate_type("date", raw, label="NativeDate value")
    return CalendarInstant.from_datetime(raw, _options(options).get("zone"))


def decode_plain_object(raw: Any, options: Any) -> CalendarInstant:
    validate_type("object", raw, label="PlainObject value")
    return CalendarInstant.from_fields(raw, _options(options).get("zone"))


def decode_instant(raw: Any, options: Any) -> CalendarInstant:
    if not isinstance(raw, CalendarInstant):
        msg = f"Invalid CalendarInstant value: got {type(raw).__name__} ({raw!r})"
        raise ShapeValidationError(msg, expected=("CalendarInstant",), actual=raw)
    return raw


# ---------------------------------------------------------------------------
# Token patterns
# ---------------------------------------------------------------------------


def decode_pattern(raw: Any, pattern: str, options: Any) -> CalendarInstant:
    """Parse *raw* against a token pattern such as ``"yyyy/MM/dd"``."""
    validate_type("string", raw, label=f"{pattern!r} formatted date")
    opts = _options(options)
    try:
        parsed = parse_pattern(raw, pattern)
    except ValueError:
        return _unparsable(raw, pattern)

    if parsed.epoch_millis is not None:
        return CalendarInstant.from_millis(parsed.epoch_millis, opts.get("zone"))

    if parsed.zone is not None:
        written_zone = resolve_zone(parsed.zone)
        if written_zone is None:
            msg = f"the zone {parsed.zone!r} is not supported"
            return CalendarInstant.invalid(UNSUPPORTED_ZONE, msg)
    elif parsed.offset is not None:
        written_zone = fixed_offset_zone(parsed.offset)
    else:
        return CalendarInstant.from_fields(_positioning_fields(parsed.fields), opts.get("zone"))

    instant = CalendarInstant.from_fields(_positioning_fields(parsed.fields), written_zone)
    if opts.get("setZone"):
        return instant
    return instant.set_zone(opts.get("zone"))


def _positioning_fields(fields: dict[str, int]) -> dict[str, int]:
    """Drop a parsed weekday when a calendar date already positions the day."""
    if "weekday" in fields and any(key in fields for key in ("year", "month", "day", "ordinal")):
        return {key: value for key, value in fields.items() if key != "weekday"}
    return fields
