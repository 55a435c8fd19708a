"""CalendarInstant — a point in time projected onto a zone.

The instant wraps an aware ``datetime`` truncated to millisecond precision.
Calendar math is delegated to ``datetime``/``zoneinfo`` and to
:class:`dateutil.relativedelta.relativedelta` for month-length-aware moves.

An instant may be *invalid* (February 40th, an unparseable string, an
unsupported zone). Invalid instants carry a reason instead of a datetime;
every operation on one returns it unchanged rather than raising.
"""

from __future__ import annotations

import calendar
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Any

from dateutil.relativedelta import relativedelta

from datexpr.calendar.zones import (
    ZoneLike,
    is_offset_fixed,
    offset_minutes,
    resolve_zone,
    zone_name,
)
from datexpr.domain.errors import ConflictingFieldsError, InvalidPropertyError
from datexpr.domain.formats import INSTANT_PROPERTIES
from datexpr.domain.units import (
    GREGORIAN_FIELDS,
    ORDINAL_FIELDS,
    TIME_FIELDS,
    WEEK_FIELDS,
    CalendarUnit,
    normalize_duration,
    normalize_fields,
    normalize_unit,
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

UNSUPPORTED_ZONE = "unsupported zone"
UNIT_OUT_OF_RANGE = "unit out of range"
UNPARSABLE = "unparsable"

_FIELD_DEFAULTS: dict[str, int] = {
    "month": 1,
    "day": 1,
    "ordinal": 1,
    "weekNumber": 1,
    "weekday": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}


def _truncate_ms(moment: datetime) -> datetime:
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def _localize(wall: datetime, zone: tzinfo) -> datetime:
    """Attach *zone* to a naive wall time, normalizing times inside DST gaps."""
    return wall.replace(tzinfo=zone).astimezone(UTC).astimezone(zone)


def _wall_fields(wall: datetime) -> dict[str, int]:
    iso = wall.isocalendar()
    return {
        "year": wall.year,
        "month": wall.month,
        "day": wall.day,
        "ordinal": wall.timetuple().tm_yday,
        "weekYear": iso.year,
        "weekNumber": iso.week,
        "weekday": iso.weekday,
        "hour": wall.hour,
        "minute": wall.minute,
        "second": wall.second,
        "millisecond": wall.microsecond // 1000,
    }


def _check_conflicts(fields: Mapping[str, int]) -> None:
    has_week = any(key in fields for key in WEEK_FIELDS)
    has_gregorian = any(key in fields for key in GREGORIAN_FIELDS)
    has_ordinal = "ordinal" in fields
    if has_week and (has_gregorian or has_ordinal):
        msg = "Can't mix weekYear/weekNumber units with year/month/day or ordinals"
        raise ConflictingFieldsError(msg)
    if has_ordinal and any(key in fields for key in ("month", "day")):
        msg = "Can't mix ordinal dates with month/day"
        raise ConflictingFieldsError(msg)


def _compose(fields: Mapping[str, int], calendar_kind: str) -> datetime:
    """Build a naive wall datetime from complete fields; ValueError if out of range."""
    if calendar_kind == "week":
        day = date.fromisocalendar(fields["weekYear"], fields["weekNumber"], fields["weekday"])
    elif calendar_kind == "ordinal":
        year = fields["year"]
        length = 366 if calendar.isleap(year) else 365
        if not 1 <= fields["ordinal"] <= length:
            msg = f"ordinal {fields['ordinal']} out of range for {year}"
            raise ValueError(msg)
        day = date(year, 1, 1) + timedelta(days=fields["ordinal"] - 1)
    else:
        day = date(fields["year"], fields["month"], fields["day"])
    millisecond = fields["millisecond"]
    if not 0 <= millisecond <= 999:
        msg = f"millisecond {millisecond} out of range"
        raise ValueError(msg)
    return datetime.combine(
        day,
        time(fields["hour"], fields["minute"], fields["second"], millisecond * 1000),
    )


def _calendar_kind(fields: Mapping[str, int]) -> str:
    if any(key in fields for key in WEEK_FIELDS):
        return "week"
    if "ordinal" in fields:
        return "ordinal"
    return "gregorian"


_UNIT_ORDERS: dict[str, tuple[str, ...]] = {
    "week": (*WEEK_FIELDS, *TIME_FIELDS),
    "ordinal": (*ORDINAL_FIELDS, *TIME_FIELDS),
    "gregorian": (*GREGORIAN_FIELDS, *TIME_FIELDS),
}


@dataclass(frozen=True)
class CalendarInstant:
    """Immutable instant + zone, or an invalid marker.

    Attributes:
        moment: Aware datetime in ``zone``; None when invalid.
        zone: The zone the instant is projected onto.
        invalid_reason: Short machine reason when invalid.
        invalid_explanation: Human explanation when invalid.
    """

    moment: datetime | None
    zone: tzinfo | None
    invalid_reason: str | None = None
    invalid_explanation: str | None = None

    # --- Construction ---

    @classmethod
    def invalid(cls, reason: str, explanation: str | None = None) -> CalendarInstant:
        return cls(None, None, reason, explanation)

    @classmethod
    def from_datetime(cls, moment: datetime, zone: ZoneLike = None) -> CalendarInstant:
        """Project *moment* onto *zone*; naive values are wall time in *zone*."""
        target = resolve_zone(zone)
        if target is None:
            return cls.invalid(UNSUPPORTED_ZONE, f"the zone {zone!r} is not supported")
        try:
            if moment.tzinfo is None or moment.utcoffset() is None:
                projected = _localize(moment, target)
            else:
                projected = moment.astimezone(target)
        except (OverflowError, ValueError) as exc:
            return cls.invalid(UNIT_OUT_OF_RANGE, str(exc))
        return cls(_truncate_ms(projected), target)

    @classmethod
    def from_millis(cls, millis: float, zone: ZoneLike = None) -> CalendarInstant:
        try:
            if not math.isfinite(millis):
                return cls.invalid(UNIT_OUT_OF_RANGE, f"{millis!r} is not a finite timestamp")
            moment = EPOCH + timedelta(milliseconds=millis)
        except OverflowError as exc:
            return cls.invalid(UNIT_OUT_OF_RANGE, str(exc))
        return cls.from_datetime(moment, zone)

    @classmethod
    def now(cls, zone: ZoneLike = None) -> CalendarInstant:
        return cls.from_datetime(datetime.now(UTC), zone)

    @classmethod
    def from_fields(cls, values: Mapping[str, Any], zone: ZoneLike = None) -> CalendarInstant:
        """Build an instant from calendar fields.

        Units larger than the largest given one default to the current
        time in *zone*; smaller ones default to their minimum.
        """
        fields = normalize_fields(dict(values))
        _check_conflicts(fields)
        target = resolve_zone(zone)
        if target is None:
            return cls.invalid(UNSUPPORTED_ZONE, f"the zone {zone!r} is not supported")

        kind = _calendar_kind(fields)
        current = _wall_fields(datetime.now(target).replace(tzinfo=None))
        complete: dict[str, int] = {}
        found_first = False
        for unit in _UNIT_ORDERS[kind]:
            if unit in fields:
                found_first = True
                complete[unit] = fields[unit]
            elif found_first:
                complete[unit] = _FIELD_DEFAULTS[unit]
            else:
                complete[unit] = current[unit]
        try:
            wall = _compose(complete, kind)
            return cls(_localize(wall, target), target)
        except (OverflowError, ValueError) as exc:
            return cls.invalid(UNIT_OUT_OF_RANGE, str(exc))

    # --- Validity ---

    @property
    def is_valid(self) -> bool:
        return self.moment is not None

    def to_millis(self) -> int | None:
        if self.moment is None:
            return None
        return (self.moment - EPOCH) // _ONE_MS

    # --- Zone ---

    def set_zone(self, zone: ZoneLike) -> CalendarInstant:
        """Reproject onto *zone*, keeping the absolute instant."""
        if self.moment is None:
            return self
        return CalendarInstant.from_datetime(self.moment, zone)

    # --- Unit boundaries ---

    def start_of(self, unit: str) -> CalendarInstant:
        unit_ = normalize_unit(unit)
        if self.moment is None:
            return self
        wall = self.moment.replace(tzinfo=None)
        if unit_ is CalendarUnit.MILLISECOND:
            return self
        wall = wall.replace(microsecond=0)
        if unit_ is not CalendarUnit.SECOND:
            wall = wall.replace(second=0)
        if unit_ not in (CalendarUnit.SECOND, CalendarUnit.MINUTE):
            wall = wall.replace(minute=0)
        if unit_ not in (CalendarUnit.SECOND, CalendarUnit.MINUTE, CalendarUnit.HOUR):
            wall = wall.replace(hour=0)
        if unit_ is CalendarUnit.YEAR:
            wall = wall.replace(month=1, day=1)
        elif unit_ is CalendarUnit.QUARTER:
            wall = wall.replace(month=(wall.month - 1) // 3 * 3 + 1, day=1)
        elif unit_ is CalendarUnit.MONTH:
            wall = wall.replace(day=1)
        elif unit_ is CalendarUnit.WEEK:
            try:
                wall = wall - timedelta(days=wall.weekday())
            except OverflowError as exc:
                return CalendarInstant.invalid(UNIT_OUT_OF_RANGE, str(exc))
        return self._with_wall(wall)

    def end_of(self, unit: str) -> CalendarInstant:
        """Last millisecond of *unit*: next unit start minus 1 ms of absolute time."""
        unit_ = normalize_unit(unit)
        if self.moment is None:
            return self
        following = self.start_of(unit_).plus({f"{unit_.value}s": 1})
        return following._shift_exact(-_ONE_MS)

    # --- Field mutation ---

    def set(self, values: Mapping[str, Any]) -> CalendarInstant:
        """Overwrite the named fields, keeping the others.

        Changing ``year``/``month`` without ``day`` clamps the day to the
        length of the resulting month.
        """
        fields = normalize_fields(dict(values))
        _check_conflicts(fields)
        if self.moment is None:
            return self
        kind = _calendar_kind(fields)
        complete = _wall_fields(self.moment.replace(tzinfo=None))
        complete.update(fields)
        try:
            if kind == "gregorian" and "day" not in fields:
                complete["day"] = min(
                    complete["day"], calendar.monthrange(complete["year"], complete["month"])[1]
                )
            wall = _compose(complete, kind)
        except (calendar.IllegalMonthError, OverflowError, ValueError) as exc:
            return CalendarInstant.invalid(UNIT_OUT_OF_RANGE, str(exc))
        return self._with_wall(wall)

    # --- Durations ---

    def plus(self, duration: Mapping[str, Any]) -> CalendarInstant:
        """Move forward; calendar units move wall-clock fields, time units move absolute time."""
        amounts = normalize_duration(dict(duration))
        if self.moment is None:
            return self
        try:
            calendar_move = relativedelta(
                years=int(amounts.get("years", 0)),
                months=int(amounts.get("months", 0) + 3 * amounts.get("quarters", 0)),
                weeks=amounts.get("weeks", 0),
                days=amounts.get("days", 0),
            )
            exact_move = timedelta(
                hours=amounts.get("hours", 0),
                minutes=amounts.get("minutes", 0),
                seconds=amounts.get("seconds", 0),
                milliseconds=amounts.get("milliseconds", 0),
            )
            moved = self
            if calendar_move:
                moved = self._with_wall(self.moment.replace(tzinfo=None) + calendar_move)
            return moved._shift_exact(exact_move)
        except (OverflowError, ValueError) as exc:
            return CalendarInstant.invalid(UNIT_OUT_OF_RANGE, str(exc))

    def minus(self, duration: Mapping[str, Any]) -> CalendarInstant:
        amounts = normalize_duration(dict(duration))
        return self.plus({unit: -amount for unit, amount in amounts.items()})

    # --- Comparison ---

    def has_same(self, other: CalendarInstant, unit: str) -> bool:
        """True if *other* falls in the same *unit* as this instant, in this zone."""
        unit_ = normalize_unit(unit)
        if self.moment is None or other.moment is None:
            return False
        here = other.set_zone(self.zone)
        return self.start_of(unit_).to_millis() == here.start_of(unit_).to_millis()

    # --- Properties ---

    def get(self, name: str) -> Any:
        """Read a property from the ``INSTANT_PROPERTIES`` allow-list."""
        if not isinstance(name, str) or name not in INSTANT_PROPERTIES:
            raise InvalidPropertyError(name)
        if self.moment is None:
            return _INVALID_PROPERTIES.get(name, lambda inst: None)(self)
        return _PROPERTY_GETTERS[name](self)

    # --- Internals ---

    def _with_wall(self, wall: datetime) -> CalendarInstant:
        assert self.zone is not None
        try:
            return CalendarInstant(_localize(wall, self.zone), self.zone)
        except (OverflowError, ValueError) as exc:
            return CalendarInstant.invalid(UNIT_OUT_OF_RANGE, str(exc))

    def _shift_exact(self, delta: timedelta) -> CalendarInstant:
        if self.moment is None or not delta:
            return self
        assert self.zone is not None
        try:
            shifted = (self.moment.astimezone(UTC) + delta).astimezone(self.zone)
        except (OverflowError, ValueError) as exc:
            return CalendarInstant.invalid(UNIT_OUT_OF_RANGE, str(exc))
        return CalendarInstant(_truncate_ms(shifted), self.zone)


def _moment(inst: CalendarInstant) -> datetime:
    assert inst.moment is not None
    return inst.moment


def _weeks_in_week_year(week_year: int) -> int:
    return date(week_year, 12, 28).isocalendar().week


_PROPERTY_GETTERS: dict[str, Callable[[CalendarInstant], Any]] = {
    "year": lambda i: _moment(i).year,
    "month": lambda i: _moment(i).month,
    "day": lambda i: _moment(i).day,
    "hour": lambda i: _moment(i).hour,
    "minute": lambda i: _moment(i).minute,
    "second": lambda i: _moment(i).second,
    "millisecond": lambda i: _moment(i).microsecond // 1000,
    "ordinal": lambda i: _moment(i).timetuple().tm_yday,
    "quarter": lambda i: (_moment(i).month - 1) // 3 + 1,
    "weekday": lambda i: _moment(i).isoweekday(),
    "weekNumber": lambda i: _moment(i).isocalendar().week,
    "weekYear": lambda i: _moment(i).isocalendar().year,
    "weeksInWeekYear": lambda i: _weeks_in_week_year(_moment(i).isocalendar().year),
    "daysInMonth": lambda i: calendar.monthrange(_moment(i).year, _moment(i).month)[1],
    "daysInYear": lambda i: 366 if calendar.isleap(_moment(i).year) else 365,
    "isInLeapYear": lambda i: calendar.isleap(_moment(i).year),
    "monthLong": lambda i: calendar.month_name[_moment(i).month],
    "monthShort": lambda i: calendar.month_abbr[_moment(i).month],
    "weekdayLong": lambda i: calendar.day_name[_moment(i).weekday()],
    "weekdayShort": lambda i: calendar.day_abbr[_moment(i).weekday()],
    "offset": lambda i: offset_minutes(_moment(i)),
    "offsetNameShort": lambda i: _moment(i).tzname(),
    "offsetNameLong": lambda i: zone_name(i.zone, i.moment) if i.zone else None,
    "isInDST": lambda i: bool(_moment(i).dst()),
    "isOffsetFixed": lambda i: is_offset_fixed(i.zone) if i.zone else None,
    "isValid": lambda i: True,
    "invalidReason": lambda i: None,
    "invalidExplanation": lambda i: None,
    "zoneName": lambda i: zone_name(i.zone, i.moment) if i.zone else None,
    "locale": lambda i: "en-US",
    "numberingSystem": lambda i: "latn",
    "outputCalendar": lambda i: "gregory",
}

_INVALID_PROPERTIES: dict[str, Callable[[CalendarInstant], Any]] = {
    "isValid": lambda i: False,
    "invalidReason": lambda i: i.invalid_reason,
    "invalidExplanation": lambda i: i.invalid_explanation,
}
