"""datexpr: date codec and calendar arithmetic for data-driven expressions."""

from datexpr.calendar.instant import CalendarInstant
from datexpr.codec import parse, serialize
from datexpr.expressions import DATE_EXPRESSIONS, Expression, evaluate

__version__ = "0.1.0"

__all__ = [
    "DATE_EXPRESSIONS",
    "CalendarInstant",
    "Expression",
    "__version__",
    "evaluate",
    "parse",
    "serialize",
]
