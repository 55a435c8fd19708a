"""Named errors raised by date expressions.

Every error a host can observe is a subclass of :class:`DateExpressionError`
and carries a stable ``code`` so callers can match on the kind of failure.
Each one also subclasses the builtin exception it refines, so plain
``except TypeError`` / ``except ValueError`` handlers keep working.

INVARIANT: content that merely fails to parse never raises; it degrades
into an invalid :class:`~datexpr.calendar.instant.CalendarInstant`.
"""

from __future__ import annotations


class DateExpressionError(Exception):
    """Base class for all errors raised by datexpr."""

    code = "DATE_EXPRESSION_ERROR"


class ShapeValidationError(DateExpressionError, TypeError):
    """A value does not match any of its accepted shapes."""

    code = "SHAPE_MISMATCH"

    def __init__(self, message: str, *, expected: tuple[str, ...], actual: object) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class UnknownConfigError(DateExpressionError, KeyError):
    """``$dateSetConfig`` received a key it does not recognize."""

    code = "UNKNOWN_CONFIG"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown DateTime config '{key}'")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidPropertyError(DateExpressionError, KeyError):
    """A property name outside the readable allow-list was requested."""

    code = "INVALID_PROPERTY"

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Invalid CalendarInstantProperty property {name!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidUnitError(DateExpressionError, ValueError):
    """An unknown calendar unit was given."""

    code = "INVALID_UNIT"

    def __init__(self, unit: object) -> None:
        self.unit = unit
        super().__init__(f"Invalid unit {unit!r}")


class InvalidDurationError(DateExpressionError, ValueError):
    """A duration amount cannot be applied."""

    code = "INVALID_DURATION"


class ConflictingFieldsError(DateExpressionError, ValueError):
    """Calendar fields from incompatible calendars were mixed."""

    code = "CONFLICTING_FIELDS"


class UnknownExpressionError(DateExpressionError, KeyError):
    """The evaluator was asked to run an expression it does not know."""

    code = "UNKNOWN_EXPRESSION"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown expression '{name}'")

    def __str__(self) -> str:
        return str(self.args[0])
