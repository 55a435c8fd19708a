"""Unified settings — CLI flags, env vars, and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``DATEXPR_*`` prefix
  3. Code defaults

The current settings object is cached by :func:`get_settings`; the CLI
replaces it through :meth:`DatexprSettings.from_cli`.
"""

from __future__ import annotations

import functools
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings


class DatexprSettings(BaseSettings):
    """Settings shared by the expression library and the CLI.

    Attributes:
        local_zone: Zone used whenever an expression asks for ``local``.
            ``None`` means the operating system's zone.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DATEXPR_",
    }

    local_zone: str | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    @field_validator("local_zone")
    @classmethod
    def _blank_is_system(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> DatexprSettings:
        """Construct settings from a CLI invocation and make them current.

        Flags left at ``None`` fall through to env vars and defaults.
        """
        flags = {key: value for key, value in cli_flags.items() if value is not None}
        settings = cls(**flags)
        _current.cache_clear()
        _override[:] = [settings]
        return settings


_override: list[DatexprSettings] = []


@functools.cache
def _current() -> DatexprSettings:
    return DatexprSettings()


def get_settings() -> DatexprSettings:
    """The active settings (CLI override, else env-derived, cached)."""
    if _override:
        return _override[0]
    return _current()


def reset_settings() -> None:
    """Forget cached and CLI-installed settings so env vars are re-read."""
    _override.clear()
    _current.cache_clear()
