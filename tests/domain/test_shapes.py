"""Tests for parameter shapes and type validation."""

from datetime import datetime

import pytest

from datexpr.domain.errors import ShapeValidationError
from datexpr.domain.shapes import DATE_FORMAT, DATE_VALUE, matches, shape_of, validate_type


class TestShapeOf:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("x", "string"),
            ([1], "array"),
            ((1,), "array"),
            ({"a": 1}, "object"),
            (1, "number"),
            (1.5, "number"),
            (True, "boolean"),
            (datetime(2021, 1, 1), "date"),
            (None, "undefined"),
        ],
    )
    def test_names_value(self, value: object, expected: str) -> None:
        assert shape_of(value) == expected

    def test_bool_is_not_a_number(self) -> None:
        assert not matches("number", False)


class TestMatches:
    def test_any_of_several(self) -> None:
        assert matches(DATE_VALUE, "2021-02-12")
        assert matches(DATE_VALUE, ["2021-02-12", "ISO"])
        assert not matches(DATE_VALUE, 10)

    def test_undefined_in_format(self) -> None:
        assert matches(DATE_FORMAT, None)

    def test_any_accepts_everything(self) -> None:
        assert matches("any", object())

    def test_unknown_shape_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown shape"):
            matches("integer", 1)


class TestValidateType:
    def test_returns_value(self) -> None:
        assert validate_type("string", "abc") == "abc"

    def test_mismatch_raises_named_error(self) -> None:
        with pytest.raises(ShapeValidationError) as exc_info:
            validate_type(("string", "array"), 10, label="date")
        assert exc_info.value.expected == ("string", "array")
        assert exc_info.value.actual == 10
        assert "Invalid date" in str(exc_info.value)

    def test_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            validate_type("object", "not an object")
