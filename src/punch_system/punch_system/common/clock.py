from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, Protocol
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from .datetime_utils import format_clock_time, format_iso_date


@dataclass(frozen=True)
class ClockReading:
    """Current instant rendered in the tenant's local calendar."""

    date: str
    time: str


class Clock(Protocol):
    def now(self, tenant: str) -> ClockReading:
        raise NotImplementedError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ZoneClock(Clock):
    """Reads the system clock and renders it in a fixed organizational timezone.

    The host's locale and timezone never leak into the reading. ``utcnow`` can be
    swapped out so tests do not depend on the wall clock.
    """

    def __init__(
        self,
        tz_name: str = DEFAULT_TIMEZONE,
        *,
        tenant_timezones: Optional[Mapping[str, str]] = None,
        utcnow: Optional[Callable[[], datetime]] = None,
    ):
        self._default_zone = ZoneInfo(tz_name)
        self._tenant_zones = {k: ZoneInfo(v) for k, v in (tenant_timezones or {}).items()}
        self._utcnow = utcnow or _utcnow

    def zone_for(self, tenant: str) -> ZoneInfo:
        return self._tenant_zones.get(tenant, self._default_zone)

    def now(self, tenant: str) -> ClockReading:
        instant = self._utcnow()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        local = instant.astimezone(self.zone_for(tenant))
        return ClockReading(date=format_iso_date(local.date()), time=format_clock_time(local.time()))
