"""Minimal evaluator for date expressions.

An expression is a list whose first element is a registered name, e.g.
``["$dateStartOf", "month", ["$date", "UnixEpochMs", "2021-02-12"]]``.
Nested expressions in argument positions are resolved first; every other
value is a literal.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import structlog

from datexpr.domain.errors import UnknownExpressionError
from datexpr.expressions.base import Expression
from datexpr.expressions.date import DATE_EXPRESSIONS

logger = logging.getLogger(__name__)


def _expression_name(candidate: Any) -> str | None:
    if isinstance(candidate, list) and candidate and isinstance(candidate[0], str):
        head = candidate[0]
        if head.startswith("$") and not head.startswith("$$"):
            return head
    return None


def evaluate(
    expression: Any,
    value: Any = None,
    interpreters: Mapping[str, Expression] = DATE_EXPRESSIONS,
) -> Any:
    """Resolve *expression* against the current *value*.

    Raises:
        UnknownExpressionError: a ``$``-prefixed name is not registered.
    """
    name = _expression_name(expression)
    if name is None:
        return value if expression == "$$VALUE" else expression

    interpreter = interpreters.get(name)
    if interpreter is None:
        raise UnknownExpressionError(name)

    args = [_resolve_argument(arg, value, interpreters) for arg in expression[1:]]
    with structlog.contextvars.bound_contextvars(expression=name):
        logger.debug("Evaluating %s", name)
        return interpreter.call(args, value)


def _resolve_argument(arg: Any, value: Any, interpreters: Mapping[str, Expression]) -> Any:
    if _expression_name(arg) is not None or arg == "$$VALUE":
        return evaluate(arg, value, interpreters)
    if isinstance(arg, list):
        # Date values such as ["2021-02-12", "ISO"] may nest expressions too
        return [_resolve_argument(item, value, interpreters) for item in arg]
    return arg
