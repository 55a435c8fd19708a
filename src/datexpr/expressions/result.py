"""ExpressionResult and ExpressionError — the outcome of one evaluation.

The CLI never sees exceptions from the expression layer: named errors are
converted into an error result with the error's stable ``code``.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_serializer

from datexpr.calendar.instant import CalendarInstant
from datexpr.codec.encoders import encode_iso
from datexpr.domain.errors import DateExpressionError
from datexpr.expressions.evaluate import evaluate


class ExpressionError(BaseModel):
    """Structured error payload within an ExpressionResult."""

    model_config = {"frozen": True}

    code: str
    message: str


class ExpressionResult(BaseModel):
    """Outcome of evaluating one expression.

    Attributes:
        ok: Whether evaluation succeeded.
        op: Name of the outermost operation (e.g. ``"$dateStartOf"``).
        value: The evaluated value on success.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    ok: bool
    op: str
    value: Any = None
    error: ExpressionError | None = None

    @field_serializer("value")
    def serialize_value(self, value: Any) -> Any:
        return to_jsonable(value)


def to_jsonable(value: Any) -> Any:
    """Map evaluation output onto JSON types (instants and datetimes as ISO)."""
    if isinstance(value, CalendarInstant):
        return encode_iso(value, None)
    if isinstance(value, datetime):
        return value.isoformat(timespec="milliseconds")
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def run_expression(expression: Any, value: Any = None) -> ExpressionResult:
    """Evaluate *expression* and wrap the outcome."""
    op = expression[0] if isinstance(expression, list) and expression else "literal"
    op = op if isinstance(op, str) else "literal"
    try:
        result = evaluate(expression, value)
    except DateExpressionError as exc:
        return ExpressionResult(
            ok=False,
            op=op,
            error=ExpressionError(code=exc.code, message=str(exc)),
        )
    return ExpressionResult(ok=True, op=op, value=result)
