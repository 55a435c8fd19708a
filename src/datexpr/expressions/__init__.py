"""Expression layer: the ``$date*`` operations and a minimal evaluator."""

from datexpr.expressions.base import Expression
from datexpr.expressions.date import DATE_EXPRESSIONS
from datexpr.expressions.evaluate import evaluate
from datexpr.expressions.result import ExpressionError, ExpressionResult, run_expression

__all__ = [
    "DATE_EXPRESSIONS",
    "Expression",
    "ExpressionError",
    "ExpressionResult",
    "evaluate",
    "run_expression",
]
