"""Zone resolution and naming.

Zones come in three flavours, mirroring how they render:

- fixed offsets (``utc``, ``UTC+1``, ``UTC-03:00``) as :class:`datetime.timezone`;
- IANA zones (``America/Sao_Paulo``) as :class:`zoneinfo.ZoneInfo`;
- the local zone, either pinned through ``DATEXPR_LOCAL_ZONE`` or the
  operating system's zone (:func:`dateutil.tz.tzlocal`).

Only fixed offsets report ``is_offset_fixed``; a fixed zero offset is the
only zone rendered as ``Z`` in ISO output.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

from datexpr.config.settings import get_settings

logger = logging.getLogger(__name__)

LOCAL_ALIASES = frozenset({"local", "system", "default"})
UTC_ALIASES = frozenset({"utc", "gmt", "z", "ut"})

_FIXED_OFFSET = re.compile(r"^(?:utc|gmt)\s*([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)

ZoneLike = str | tzinfo | None


def fixed_offset_zone(minutes: int) -> timezone:
    """Fixed-offset zone for *minutes* east of UTC."""
    if minutes == 0:
        return UTC
    return timezone(timedelta(minutes=minutes))


def local_zone() -> tzinfo:
    """The zone ``local`` refers to right now."""
    pinned = get_settings().local_zone
    if pinned:
        zone = _resolve_named(pinned)
        if zone is not None:
            return zone
        logger.warning("Ignoring unsupported local zone %r; using system zone", pinned)
    return dateutil_tz.tzlocal()


def resolve_zone(zone: ZoneLike) -> tzinfo | None:
    """Resolve a zone name or ``tzinfo``; None if it is not supported.

    ``None`` resolves to the local zone.
    """
    if zone is None:
        return local_zone()
    if isinstance(zone, tzinfo):
        return zone
    if not isinstance(zone, str):
        logger.debug("Unsupported zone value of type %s", type(zone).__name__)
        return None
    if zone.strip().lower() in LOCAL_ALIASES:
        return local_zone()
    resolved = _resolve_named(zone)
    if resolved is None:
        logger.debug("Unsupported zone %r", zone)
    return resolved


def _resolve_named(name: str) -> tzinfo | None:
    key = name.strip()
    lowered = key.lower()
    if lowered in UTC_ALIASES:
        return UTC
    match = _FIXED_OFFSET.match(key)
    if match:
        sign, hours, minutes = match.groups()
        hours_i, minutes_i = int(hours), int(minutes or 0)
        if hours_i > 23 or minutes_i > 59:
            return None
        total = hours_i * 60 + minutes_i
        return fixed_offset_zone(-total if sign == "-" else total)
    if not key:
        return None
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def is_offset_fixed(zone: tzinfo) -> bool:
    return isinstance(zone, timezone)


def offset_minutes(moment: datetime) -> int:
    """UTC offset of an aware datetime, in whole minutes."""
    delta = moment.utcoffset() or timedelta(0)
    return int(delta.total_seconds() // 60)


def format_offset(minutes: int, style: str = "techie") -> str:
    """Render an offset as ``+05:30`` (techie), ``+0530`` (short) or ``+5:30`` (narrow)."""
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    if style == "short":
        return f"{sign}{hours:02d}{mins:02d}"
    if style == "narrow":
        return f"{sign}{hours}:{mins:02d}" if mins else f"{sign}{hours}"
    return f"{sign}{hours:02d}:{mins:02d}"


def zone_name(zone: tzinfo, moment: datetime | None = None) -> str:
    """Canonical name: IANA key, ``UTC``/``UTC+5:30`` for fixed offsets."""
    if isinstance(zone, ZoneInfo):
        return zone.key
    if isinstance(zone, timezone):
        minutes = int((zone.utcoffset(None) or timedelta(0)).total_seconds() // 60)
        return "UTC" if minutes == 0 else f"UTC{format_offset(minutes, 'narrow')}"
    reference = moment or datetime.now(zone)
    return reference.tzname() or "local"
