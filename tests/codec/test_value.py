"""Tests for date value and format request destructuring."""

import pytest

from datexpr.codec.value import destructure, destructure_format


class TestDestructure:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2021-02-12", ("2021-02-12", "ISO", None)),
            (10, (10, "ISO", None)),
            (None, (None, "ISO", None)),
            (["2021-02-12"], ("2021-02-12", "ISO", None)),
            (["2021-02-12", {"zone": "utc"}], ("2021-02-12", "ISO", {"zone": "utc"})),
            ([10, "UnixEpochMs"], (10, "UnixEpochMs", None)),
            ([10, "UnixEpochMs", {"zone": "utc"}], (10, "UnixEpochMs", {"zone": "utc"})),
            (("12/02/2021", "dd/MM/yyyy"), ("12/02/2021", "dd/MM/yyyy", None)),
            ([], (None, "ISO", None)),
        ],
    )
    def test_shapes(self, value: object, expected: tuple[object, str, object]) -> None:
        assert destructure(value) == expected

    def test_string_second_element_is_always_a_tag(self) -> None:
        raw, tag, options = destructure(["2021-02-12", "zone"])
        assert tag == "zone"
        assert options is None


class TestDestructureFormat:
    def test_none_is_iso(self) -> None:
        assert destructure_format(None) == ("ISO", None)

    def test_bare_tag(self) -> None:
        assert destructure_format("SQL") == ("SQL", None)

    def test_tag_with_options(self) -> None:
        assert destructure_format(["ISO", {"zone": "utc"}]) == ("ISO", {"zone": "utc"})

    def test_missing_tag_defaults(self) -> None:
        assert destructure_format([None, {"zone": "utc"}]) == ("ISO", {"zone": "utc"})
