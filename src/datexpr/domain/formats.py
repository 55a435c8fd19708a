"""Format tag registry.

The closed set of representation tags a date can be read from or written
to. Any string outside this set is treated as a token pattern
(``"yyyy/MM/dd"``) by both the parser and the serializer.
"""

from __future__ import annotations

from enum import StrEnum


class DateFormatTag(StrEnum):
    """Recognized external date representations."""

    ISO = "ISO"
    ISO_DATE = "ISODate"
    ISO_WEEK_DATE = "ISOWeekDate"
    ISO_TIME = "ISOTime"
    RFC2822 = "RFC2822"
    HTTP = "HTTP"
    SQL = "SQL"
    SQL_DATE = "SQLDate"
    SQL_TIME = "SQLTime"
    UNIX_EPOCH_MS = "UnixEpochMs"
    UNIX_EPOCH_S = "UnixEpochS"
    NATIVE_DATE = "NativeDate"
    PLAIN_OBJECT = "PlainObject"
    CALENDAR_INSTANT = "CalendarInstant"
    CALENDAR_INSTANT_PROPERTY = "CalendarInstantProperty"


DEFAULT_FORMAT = DateFormatTag.ISO

# Tags whose rendering can be parsed back into the same instant and zone.
LOSSLESS_FORMATS: frozenset[str] = frozenset(
    {
        DateFormatTag.ISO,
        DateFormatTag.RFC2822,
        DateFormatTag.HTTP,
        DateFormatTag.SQL,
        DateFormatTag.UNIX_EPOCH_MS,
        DateFormatTag.UNIX_EPOCH_S,
        DateFormatTag.NATIVE_DATE,
        DateFormatTag.PLAIN_OBJECT,
        DateFormatTag.CALENDAR_INSTANT,
    }
)

# --- Readable instant properties (CalendarInstantProperty) ---

INSTANT_PROPERTIES: tuple[str, ...] = (
    "day",
    "daysInMonth",
    "daysInYear",
    "hour",
    "invalidExplanation",
    "invalidReason",
    "isInDST",
    "isInLeapYear",
    "isOffsetFixed",
    "isValid",
    "locale",
    "millisecond",
    "minute",
    "month",
    "monthLong",
    "monthShort",
    "numberingSystem",
    "offset",
    "offsetNameLong",
    "offsetNameShort",
    "ordinal",
    "outputCalendar",
    "quarter",
    "second",
    "weekNumber",
    "weekYear",
    "weekday",
    "weekdayLong",
    "weekdayShort",
    "weeksInWeekYear",
    "year",
    "zoneName",
)
