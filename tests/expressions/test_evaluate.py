"""Tests for the minimal expression evaluator."""

import pytest

from datexpr.domain.errors import UnknownExpressionError
from datexpr.expressions import DATE_EXPRESSIONS, Expression, evaluate


class TestEvaluate:
    def test_literals_pass_through(self) -> None:
        assert evaluate("2021-02-12") == "2021-02-12"
        assert evaluate([1, 2]) == [1, 2]
        assert evaluate({"a": 1}) == {"a": 1}

    def test_value_reference(self) -> None:
        assert evaluate("$$VALUE", "current") == "current"

    def test_nested_expressions_resolve_first(self) -> None:
        expression = [
            "$dateStartOf",
            ["month", "utc"],
            "ISODate",
            [["$date", "ISO", "2021-02-12T12:34:15.020-03:00"], {"zone": "utc"}],
        ]
        assert evaluate(expression) == "2021-02-01"

    def test_nested_expression_sees_current_value(self) -> None:
        expression = ["$dateGt", ["$dateMoveBackward", {"days": 1}]]
        assert evaluate(expression, "2021-02-12T12:34:15.020Z") is True

    def test_value_reference_in_argument(self) -> None:
        expression = ["$dateEq", "$$VALUE", "day", "2021-02-12T23:00:00-03:00"]
        assert evaluate(expression, "2021-02-12T01:00:00-03:00") is True

    def test_unknown_expression_raises(self) -> None:
        with pytest.raises(UnknownExpressionError, match=r"\$dateTomorrow"):
            evaluate(["$dateTomorrow"], "2021-02-12")

    def test_custom_interpreters(self) -> None:
        interpreters = {
            **DATE_EXPRESSIONS,
            "$upper": Expression("$upper", str.upper, (("string",),)),
        }
        assert evaluate(["$upper", ["$date", "MMMM"]], "2021-02-12", interpreters) == "FEBRUARY"
