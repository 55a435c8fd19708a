"""Tests for zone resolution, offsets and zone names."""

from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from datexpr.calendar.zones import (
    fixed_offset_zone,
    format_offset,
    is_offset_fixed,
    local_zone,
    offset_minutes,
    resolve_zone,
    zone_name,
)
from datexpr.config.settings import reset_settings


class TestResolveZone:
    @pytest.mark.parametrize("text", ["utc", "UTC", "gmt", "Z", "UTC+0", "utc-00:00"])
    def test_utc_aliases_are_fixed_utc(self, text: str) -> None:
        assert resolve_zone(text) is UTC

    @pytest.mark.parametrize(
        ("text", "minutes"),
        [("UTC+1", 60), ("UTC-3", -180), ("UTC+05:30", 330), ("UTC+0530", 330)],
    )
    def test_fixed_offsets(self, text: str, minutes: int) -> None:
        zone = resolve_zone(text)
        assert zone == timezone(timedelta(minutes=minutes))

    def test_iana(self) -> None:
        assert resolve_zone("Europe/Paris") == ZoneInfo("Europe/Paris")

    @pytest.mark.parametrize("text", [None, "local", "system", "default"])
    def test_local_uses_pinned_zone(self, text: str | None) -> None:
        assert resolve_zone(text) == ZoneInfo("America/Sao_Paulo")

    def test_tzinfo_passes_through(self) -> None:
        zone = timezone(timedelta(hours=2))
        assert resolve_zone(zone) is zone

    @pytest.mark.parametrize("text", ["Mars/Olympus", "UTC+25", "", 42])
    def test_unsupported(self, text: object) -> None:
        assert resolve_zone(text) is None  # type: ignore[arg-type]


class TestLocalZone:
    def test_unpinned_falls_back_to_system(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATEXPR_LOCAL_ZONE")
        reset_settings()
        assert local_zone() is not None
        assert not is_offset_fixed(local_zone())

    def test_unsupported_pin_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATEXPR_LOCAL_ZONE", "Nowhere/Land")
        reset_settings()
        assert local_zone() is not None


class TestOffsets:
    def test_fixed_zero_is_utc(self) -> None:
        assert fixed_offset_zone(0) is UTC

    def test_only_fixed_zones_report_fixed(self) -> None:
        assert is_offset_fixed(UTC)
        assert is_offset_fixed(fixed_offset_zone(60))
        assert not is_offset_fixed(ZoneInfo("UTC"))

    def test_offset_minutes(self) -> None:
        moment = datetime(2021, 2, 12, tzinfo=ZoneInfo("America/Sao_Paulo"))
        assert offset_minutes(moment) == -180

    @pytest.mark.parametrize(
        ("minutes", "style", "expected"),
        [
            (330, "techie", "+05:30"),
            (330, "short", "+0530"),
            (330, "narrow", "+5:30"),
            (-180, "techie", "-03:00"),
            (-180, "narrow", "-3"),
            (0, "techie", "+00:00"),
        ],
    )
    def test_format_offset(self, minutes: int, style: str, expected: str) -> None:
        assert format_offset(minutes, style) == expected


class TestZoneName:
    def test_iana_key(self) -> None:
        assert zone_name(ZoneInfo("Asia/Tokyo")) == "Asia/Tokyo"

    def test_fixed(self) -> None:
        assert zone_name(UTC) == "UTC"
        assert zone_name(fixed_offset_zone(60)) == "UTC+1"
        assert zone_name(fixed_offset_zone(-330)) == "UTC-5:30"
