"""Token patterns for custom formats (``"yyyy/MM/dd"``, ``"MMMM"``).

A run of the same ASCII letter is one token; text inside single quotes is
literal (``''`` is a quote); any other character is literal. Unknown letter
runs are rendered literally and must match literally when parsing.

Month and weekday names come from the :mod:`calendar` module (English under
the default C locale).
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, tzinfo

from datexpr.calendar.zones import format_offset, offset_minutes, zone_name

INVALID_RENDERING = "Invalid DateTime"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class Token:
    """One pattern element; ``literal`` tokens are copied verbatim."""

    text: str
    literal: bool = False


def tokenize(pattern: str) -> list[Token]:
    """Split *pattern* into letter-run tokens and literal text."""
    tokens: list[Token] = []
    literal: list[str] = []
    i = 0

    def flush() -> None:
        if literal:
            tokens.append(Token("".join(literal), literal=True))
            literal.clear()

    while i < len(pattern):
        ch = pattern[i]
        if ch == "'":
            if pattern.startswith("''", i):
                literal.append("'")
                i += 2
                continue
            i += 1
            while i < len(pattern):
                if pattern.startswith("''", i):
                    literal.append("'")
                    i += 2
                elif pattern[i] == "'":
                    i += 1
                    break
                else:
                    literal.append(pattern[i])
                    i += 1
        elif ch.isascii() and ch.isalpha():
            flush()
            end = i
            while end < len(pattern) and pattern[end] == ch:
                end += 1
            tokens.append(Token(pattern[i:end]))
            i = end
        else:
            literal.append(ch)
            i += 1
    flush()
    return tokens


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _since_epoch(m: datetime, unit: timedelta) -> int:
    return (m - _EPOCH) // unit


_Renderer = Callable[[datetime, tzinfo], str]

_RENDERERS: dict[str, _Renderer] = {
    # era
    "G": lambda m, z: "AD",
    "GG": lambda m, z: "Anno Domini",
    # year
    "y": lambda m, z: str(m.year),
    "yy": lambda m, z: f"{m.year % 100:02d}",
    "yyyy": lambda m, z: f"{m.year:04d}",
    "yyyyyy": lambda m, z: f"{m.year:06d}",
    # week year / week number
    "k": lambda m, z: str(m.isocalendar().year),
    "kk": lambda m, z: f"{m.isocalendar().year % 100:02d}",
    "kkkk": lambda m, z: f"{m.isocalendar().year:04d}",
    "W": lambda m, z: str(m.isocalendar().week),
    "WW": lambda m, z: f"{m.isocalendar().week:02d}",
    # quarter
    "q": lambda m, z: str((m.month - 1) // 3 + 1),
    "qq": lambda m, z: f"{(m.month - 1) // 3 + 1:02d}",
    # month
    "M": lambda m, z: str(m.month),
    "MM": lambda m, z: f"{m.month:02d}",
    "MMM": lambda m, z: calendar.month_abbr[m.month],
    "MMMM": lambda m, z: calendar.month_name[m.month],
    "MMMMM": lambda m, z: calendar.month_name[m.month][:1],
    # day
    "d": lambda m, z: str(m.day),
    "dd": lambda m, z: f"{m.day:02d}",
    "o": lambda m, z: str(m.timetuple().tm_yday),
    "ooo": lambda m, z: f"{m.timetuple().tm_yday:03d}",
    # weekday
    "E": lambda m, z: str(m.isoweekday()),
    "EEE": lambda m, z: calendar.day_abbr[m.weekday()],
    "EEEE": lambda m, z: calendar.day_name[m.weekday()],
    "EEEEE": lambda m, z: calendar.day_name[m.weekday()][:1],
    # time
    "H": lambda m, z: str(m.hour),
    "HH": lambda m, z: f"{m.hour:02d}",
    "h": lambda m, z: str(m.hour % 12 or 12),
    "hh": lambda m, z: f"{m.hour % 12 or 12:02d}",
    "a": lambda m, z: "AM" if m.hour < 12 else "PM",
    "m": lambda m, z: str(m.minute),
    "mm": lambda m, z: f"{m.minute:02d}",
    "s": lambda m, z: str(m.second),
    "ss": lambda m, z: f"{m.second:02d}",
    "S": lambda m, z: str(m.microsecond // 1000),
    "SSS": lambda m, z: f"{m.microsecond // 1000:03d}",
    "u": lambda m, z: f"{m.microsecond // 1000:03d}",
    # zone
    "Z": lambda m, z: format_offset(offset_minutes(m), "narrow"),
    "ZZ": lambda m, z: format_offset(offset_minutes(m)),
    "ZZZ": lambda m, z: format_offset(offset_minutes(m), "short"),
    "ZZZZ": lambda m, z: m.tzname() or format_offset(offset_minutes(m)),
    "ZZZZZ": lambda m, z: zone_name(z, m),
    "z": lambda m, z: zone_name(z, m),
    # epoch
    "X": lambda m, z: str(_since_epoch(m, timedelta(seconds=1))),
    "x": lambda m, z: str(_since_epoch(m, timedelta(milliseconds=1))),
}

# Standalone forms render like their in-context counterparts.
for _standalone, _contextual in (("L", "M"), ("c", "E")):
    for _width in (1, 2, 3, 4, 5):
        _source = _contextual * _width
        if _source in _RENDERERS:
            _RENDERERS[_standalone * _width] = _RENDERERS[_source]


def format_pattern(moment: datetime, zone: tzinfo, pattern: str) -> str:
    """Render *moment* (aware, in *zone*) using a token *pattern*."""
    parts: list[str] = []
    for token in tokenize(pattern):
        renderer = None if token.literal else _RENDERERS.get(token.text)
        parts.append(token.text if renderer is None else renderer(moment, zone))
    return "".join(parts)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@dataclass
class ParsedPattern:
    """Raw values captured from a pattern match."""

    fields: dict[str, int] = field(default_factory=dict)
    meridiem: str | None = None
    offset: int | None = None
    zone: str | None = None
    epoch_millis: float | None = None


def _names(values: list[str]) -> str:
    options = sorted((name for name in values if name), key=len, reverse=True)
    return "(" + "|".join(re.escape(name) for name in options) + ")"


def _name_index(values: list[str], text: str) -> int:
    lowered = text.lower()
    for index, name in enumerate(values):
        if name and name.lower() == lowered:
            return index
    msg = f"Unknown name {text!r}"
    raise ValueError(msg)


def _untruncate_year(value: int) -> int:
    if value > 99:
        return value
    return 1900 + value if value > 60 else 2000 + value


def _parse_offset(text: str) -> int:
    if text.upper() == "Z":
        return 0
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    if len(digits) <= 2:
        hours, minutes = int(digits), 0
    else:
        hours, minutes = int(digits[:-2]), int(digits[-2:])
    return sign * (hours * 60 + minutes)


def _setter(name: str, convert: Callable[[str], int] = int) -> Callable[[ParsedPattern, str], None]:
    def apply(parsed: ParsedPattern, text: str) -> None:
        parsed.fields[name] = convert(text)

    return apply


def _set_fraction(parsed: ParsedPattern, text: str) -> None:
    parsed.fields["millisecond"] = int(text[:3].ljust(3, "0"))


def _set_meridiem(parsed: ParsedPattern, text: str) -> None:
    parsed.meridiem = text.upper()


def _set_offset(parsed: ParsedPattern, text: str) -> None:
    parsed.offset = _parse_offset(text)


def _set_zone(parsed: ParsedPattern, text: str) -> None:
    parsed.zone = text


def _set_epoch(scale: int) -> Callable[[ParsedPattern, str], None]:
    def apply(parsed: ParsedPattern, text: str) -> None:
        parsed.epoch_millis = float(text) * scale

    return apply


def _set_quarter(parsed: ParsedPattern, text: str) -> None:
    parsed.fields.setdefault("month", (int(text) - 1) * 3 + 1)


def _month_name(values: list[str]) -> Callable[[ParsedPattern, str], None]:
    return _setter("month", lambda text: _name_index(values, text))


def _weekday_name(values: list[str]) -> Callable[[ParsedPattern, str], None]:
    # Weekday names only validate; they never position the date.
    def apply(parsed: ParsedPattern, text: str) -> None:
        _name_index(values, text)

    return apply


_OFFSET_RE = r"(Z|[+-]\d{1,2}(?::?\d{2})?)"

_PARSERS: dict[str, tuple[str, Callable[[ParsedPattern, str], None]]] = {
    "y": (r"(\d{1,6})", _setter("year")),
    "yy": (r"(\d{2})", _setter("year", lambda t: _untruncate_year(int(t)))),
    "yyyy": (r"(\d{4})", _setter("year")),
    "yyyyyy": (r"(\d{6})", _setter("year")),
    "k": (r"(\d{1,6})", _setter("weekYear")),
    "kk": (r"(\d{2})", _setter("weekYear", lambda t: _untruncate_year(int(t)))),
    "kkkk": (r"(\d{4})", _setter("weekYear")),
    "W": (r"(\d{1,2})", _setter("weekNumber")),
    "WW": (r"(\d{2})", _setter("weekNumber")),
    "q": (r"([1-4])", _set_quarter),
    "qq": (r"(0[1-4])", _set_quarter),
    "M": (r"(\d{1,2})", _setter("month")),
    "MM": (r"(\d{2})", _setter("month")),
    "MMM": (_names(list(calendar.month_abbr)), _month_name(list(calendar.month_abbr))),
    "MMMM": (_names(list(calendar.month_name)), _month_name(list(calendar.month_name))),
    "d": (r"(\d{1,2})", _setter("day")),
    "dd": (r"(\d{2})", _setter("day")),
    "o": (r"(\d{1,3})", _setter("ordinal")),
    "ooo": (r"(\d{3})", _setter("ordinal")),
    "E": (r"([1-7])", _setter("weekday")),
    "EEE": (_names(list(calendar.day_abbr)), _weekday_name(list(calendar.day_abbr))),
    "EEEE": (_names(list(calendar.day_name)), _weekday_name(list(calendar.day_name))),
    "H": (r"(\d{1,2})", _setter("hour")),
    "HH": (r"(\d{2})", _setter("hour")),
    "h": (r"(\d{1,2})", _setter("hour")),
    "hh": (r"(\d{2})", _setter("hour")),
    "a": (r"(AM|PM)", _set_meridiem),
    "m": (r"(\d{1,2})", _setter("minute")),
    "mm": (r"(\d{2})", _setter("minute")),
    "s": (r"(\d{1,2})", _setter("second")),
    "ss": (r"(\d{2})", _setter("second")),
    "S": (r"(\d{1,3})", _setter("millisecond")),
    "SSS": (r"(\d{3})", _setter("millisecond")),
    "u": (r"(\d{1,9})", _set_fraction),
    "Z": (_OFFSET_RE, _set_offset),
    "ZZ": (_OFFSET_RE, _set_offset),
    "ZZZ": (_OFFSET_RE, _set_offset),
    "z": (r"([A-Za-z_]+(?:/[A-Za-z0-9_+\-]+)*)", _set_zone),
    "X": (r"(-?\d+(?:\.\d+)?)", _set_epoch(1000)),
    "x": (r"(-?\d+)", _set_epoch(1)),
}

for _standalone, _contextual in (("L", "M"), ("c", "E")):
    for _width in (1, 2, 3, 4):
        _source = _contextual * _width
        if _source in _PARSERS:
            _PARSERS[_standalone * _width] = _PARSERS[_source]


def parse_pattern(text: str, pattern: str) -> ParsedPattern:
    """Match *text* against a token *pattern*.

    Raises:
        ValueError: *text* does not match, or a captured name is unknown.
    """
    regex: list[str] = []
    setters: list[Callable[[ParsedPattern, str], None]] = []
    for token in tokenize(pattern):
        entry = None if token.literal else _PARSERS.get(token.text)
        if entry is None:
            regex.append(re.escape(token.text))
            continue
        regex.append(entry[0])
        setters.append(entry[1])

    match = re.fullmatch("".join(regex), text, flags=re.IGNORECASE)
    if match is None:
        msg = f"the input {text!r} can't be parsed as format {pattern}"
        raise ValueError(msg)

    parsed = ParsedPattern()
    for setter, value in zip(setters, match.groups(), strict=True):
        setter(parsed, value)

    if parsed.meridiem is not None and "hour" in parsed.fields:
        hour = parsed.fields["hour"]
        if not 1 <= hour <= 12:
            msg = f"hour {hour} out of range for a 12-hour clock"
            raise ValueError(msg)
        parsed.fields["hour"] = hour % 12 + (12 if parsed.meridiem == "PM" else 0)
    return parsed
