"""Shared pytest fixtures for datexpr tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from click.testing import CliRunner

from datexpr.config.settings import reset_settings

# UTC-3 all year round (no DST since 2019), so expectations are stable.
LOCAL_ZONE = "America/Sao_Paulo"


@pytest.fixture(autouse=True)
def _pinned_local_zone(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Pin ``local`` to São Paulo and drop any cached or CLI-installed settings."""
    monkeypatch.setenv("DATEXPR_LOCAL_ZONE", LOCAL_ZONE)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()
