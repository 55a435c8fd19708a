"""Tests for DatexprSettings and the settings cache."""

import pytest

from datexpr.config.settings import DatexprSettings, get_settings, reset_settings


class TestDatexprSettingsDefaults:
    def test_all_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """With no env vars, all fields use code defaults."""
        monkeypatch.delenv("DATEXPR_LOCAL_ZONE", raising=False)
        settings = DatexprSettings()
        assert settings.local_zone is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.log_json is False

    def test_frozen(self) -> None:
        settings = DatexprSettings()
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestEnvSource:
    def test_zone_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATEXPR_LOCAL_ZONE", "Europe/Paris")
        assert DatexprSettings().local_zone == "Europe/Paris"

    def test_blank_zone_means_system(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATEXPR_LOCAL_ZONE", "  ")
        assert DatexprSettings().local_zone is None

    def test_flag_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATEXPR_VERBOSE", "true")
        assert DatexprSettings().verbose is True


class TestFromCli:
    def test_cli_flag_overrides_env(self) -> None:
        settings = DatexprSettings.from_cli(local_zone="Asia/Tokyo")
        assert settings.local_zone == "Asia/Tokyo"

    def test_none_falls_through_to_env(self) -> None:
        settings = DatexprSettings.from_cli(local_zone=None, json_output=True)
        assert settings.local_zone == "America/Sao_Paulo"
        assert settings.json_output is True

    def test_becomes_current(self) -> None:
        settings = DatexprSettings.from_cli(local_zone="Asia/Tokyo")
        assert get_settings() is settings


class TestGetSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_reset_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert get_settings().local_zone == "America/Sao_Paulo"
        monkeypatch.setenv("DATEXPR_LOCAL_ZONE", "Europe/Paris")
        assert get_settings().local_zone == "America/Sao_Paulo"
        reset_settings()
        assert get_settings().local_zone == "Europe/Paris"

    def test_reset_drops_cli_override(self) -> None:
        DatexprSettings.from_cli(local_zone="Asia/Tokyo")
        reset_settings()
        assert get_settings().local_zone == "America/Sao_Paulo"
