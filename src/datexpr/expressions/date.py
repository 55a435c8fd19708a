"""Date expressions.

Each operation parses its date argument, applies one calendar operation
and serializes the result. The last parameter of every operation is the
date itself; hosts fill it with the current value when omitted (see
:mod:`datexpr.expressions.base`).

Format requests default to ``ISO``; unit and set values default to the
``local`` zone.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from datexpr.calendar.instant import CalendarInstant
from datexpr.codec.registry import parse, serialize
from datexpr.domain import shapes
from datexpr.domain.errors import DateExpressionError, UnknownConfigError
from datexpr.domain.formats import DEFAULT_FORMAT
from datexpr.expressions.base import Expression

DateValue = Any
DateFormat = str | list[Any] | None

DEFAULT_ZONE = "local"
DEFAULT_COMPARE_UNIT = "millisecond"


def _zone_sensitive(option: Any) -> tuple[Any, Any]:
    """Split ``value`` or ``[value, zone]``; zone defaults to ``local``."""
    if isinstance(option, (list, tuple)):
        value = option[0] if option else None
        zone = option[1] if len(option) > 1 and option[1] is not None else DEFAULT_ZONE
        return value, zone
    return option, DEFAULT_ZONE


def _fmt(serialize_format: DateFormat) -> Any:
    return DEFAULT_FORMAT if serialize_format is None else serialize_format


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def date(serialize_format: DateFormat, value: DateValue) -> Any:
    """Parse *value* and serialize it into *serialize_format* (pure conversion)."""
    return serialize(parse(value), _fmt(serialize_format))


def date_now(serialize_format: DateFormat) -> Any:
    """The current wall-clock instant, in the local zone unless the format overrides it."""
    return serialize(CalendarInstant.now(DEFAULT_ZONE), _fmt(serialize_format))


def date_is_valid(value: Any) -> bool:
    """True if *value* parses into a valid instant. Never raises."""
    try:
        return parse(value).is_valid
    except (DateExpressionError, ArithmeticError, TypeError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Calendar operations
# ---------------------------------------------------------------------------


def date_start_of(unit_value: Any, serialize_format: DateFormat, value: DateValue) -> Any:
    unit, zone = _zone_sensitive(unit_value)
    return serialize(parse(value).set_zone(zone).start_of(unit), _fmt(serialize_format))


def date_end_of(unit_value: Any, serialize_format: DateFormat, value: DateValue) -> Any:
    unit, zone = _zone_sensitive(unit_value)
    return serialize(parse(value).set_zone(zone).end_of(unit), _fmt(serialize_format))


def date_set(values: Any, serialize_format: DateFormat, value: DateValue) -> Any:
    """Overwrite calendar fields (``{"month": 1}`` or ``[{"month": 1}, "utc"]``)."""
    fields, zone = _zone_sensitive(values)
    shapes.validate_type("object", fields, label="$dateSet values")
    return serialize(parse(value).set_zone(zone).set(fields), _fmt(serialize_format))


_CONFIG_MUTATIONS: dict[str, Callable[[CalendarInstant, Any], CalendarInstant]] = {
    "zone": lambda instant, zone: instant.set_zone(zone),
}


def date_set_config(
    config: Mapping[str, Any], serialize_format: DateFormat, value: DateValue
) -> Any:
    """Apply configuration keys in order. Only ``zone`` is recognized."""
    instant = parse(value)
    for key, setting in config.items():
        mutation = _CONFIG_MUTATIONS.get(key)
        if mutation is None:
            raise UnknownConfigError(key)
        instant = mutation(instant, setting)
    return serialize(instant, _fmt(serialize_format))


def date_move_forward(
    duration: Mapping[str, Any], serialize_format: DateFormat, value: DateValue
) -> Any:
    return serialize(parse(value).plus(duration), _fmt(serialize_format))


def date_move_backward(
    duration: Mapping[str, Any], serialize_format: DateFormat, value: DateValue
) -> Any:
    return serialize(parse(value).minus(duration), _fmt(serialize_format))


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------


def _comparison(compare: Callable[[int, int], bool]) -> Callable[[DateValue, DateValue], bool]:
    """Compare absolute instants; an invalid side makes every comparison false."""

    def run(reference: DateValue, value: DateValue) -> bool:
        reference_ms = parse(reference).to_millis()
        value_ms = parse(value).to_millis()
        if reference_ms is None or value_ms is None:
            return False
        return compare(reference_ms, value_ms)

    return run


date_gt = _comparison(lambda reference, value: value > reference)
date_gte = _comparison(lambda reference, value: value >= reference)
date_lt = _comparison(lambda reference, value: value < reference)
date_lte = _comparison(lambda reference, value: value <= reference)


def date_eq(reference: DateValue, compare_unit: str | None, value: DateValue) -> bool:
    """True if both dates fall within the same *compare_unit* (default millisecond).

    The unit is evaluated in the reference's zone.
    """
    unit = DEFAULT_COMPARE_UNIT if compare_unit is None else compare_unit
    return parse(reference).has_same(parse(value), unit)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

DATE_EXPRESSIONS: dict[str, Expression] = {
    expression.name: expression
    for expression in (
        Expression("$date", date, (shapes.DATE_FORMAT, shapes.DATE_VALUE)),
        Expression("$dateNow", date_now, (shapes.DATE_FORMAT,)),
        Expression("$dateIsValid", date_is_valid, (shapes.ANY,)),
        Expression(
            "$dateStartOf",
            date_start_of,
            (shapes.DATE_UNIT_VALUE, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
        Expression(
            "$dateEndOf",
            date_end_of,
            (shapes.DATE_UNIT_VALUE, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
        Expression(
            "$dateSet",
            date_set,
            (shapes.DATE_SET_VALUES, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
        Expression(
            "$dateSetConfig",
            date_set_config,
            (shapes.CONFIG, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
        Expression("$dateGt", date_gt, (shapes.DATE_VALUE, shapes.DATE_VALUE)),
        Expression("$dateGte", date_gte, (shapes.DATE_VALUE, shapes.DATE_VALUE)),
        Expression("$dateLt", date_lt, (shapes.DATE_VALUE, shapes.DATE_VALUE)),
        Expression("$dateLte", date_lte, (shapes.DATE_VALUE, shapes.DATE_VALUE)),
        Expression(
            "$dateEq",
            date_eq,
            (shapes.DATE_VALUE, shapes.COMPARE_UNIT, shapes.DATE_VALUE),
        ),
        Expression(
            "$dateMoveForward",
            date_move_forward,
            (shapes.DURATION, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
        Expression(
            "$dateMoveBackward",
            date_move_backward,
            (shapes.DURATION, shapes.DATE_FORMAT, shapes.DATE_VALUE),
        ),
    )
}
