"""Tests for the Rich console helpers."""

import math
from io import StringIO

import pytest

from datexpr.output.console import (
    DATEXPR_THEME,
    create_console,
    get_output,
    render,
    style_for_value,
)


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[bold red]hello[/bold red]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "hello" in output

    @pytest.mark.parametrize(("width", "expected"), [(None, 120), (80, 80)])
    def test_width(self, width: int | None, expected: int) -> None:
        assert create_console(width=width).width == expected

    def test_numbers_are_not_highlighted(self) -> None:
        console = create_console()
        console.print("offset=-180")
        assert get_output(console) == "offset=-180\n"


class TestGetOutput:
    def test_extracts_printed_text(self) -> None:
        console = create_console(no_color=True)
        console.print("hello world")
        assert "hello world" in get_output(console)

    def test_empty_console(self) -> None:
        console = create_console()
        assert get_output(console) == ""


class TestTheme:
    def test_theme_has_expected_styles(self) -> None:
        expected = [
            "dx.ok",
            "dx.error",
            "dx.op",
            "dx.key",
            "dx.tag",
            "dx.value",
            "dx.number",
            "dx.bool",
            "dx.invalid",
        ]
        for name in expected:
            assert name in DATEXPR_THEME.styles, f"Missing theme style: {name}"


class TestStyleForValue:
    def test_scalars(self) -> None:
        assert style_for_value("2021-02-12") == "dx.value"
        assert style_for_value(True) == "dx.bool"
        assert style_for_value(1613144055020) == "dx.number"
        assert style_for_value({"year": 2021}) == "dx.value"

    def test_missing_values_are_invalid(self) -> None:
        assert style_for_value(None) == "dx.invalid"
        assert style_for_value(math.nan) == "dx.invalid"


class TestRender:
    def test_one_line_per_renderable(self) -> None:
        assert render("first", "second") == "first\nsecond"

    def test_no_trailing_newline(self) -> None:
        assert not render("only").endswith("\n")
