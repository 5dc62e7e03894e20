from __future__ import annotations

import re
from datetime import date, datetime, time

_CLOCK_12H = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])\s*$")
_CLOCK_24H = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_clock_time(value: time) -> str:
    """Render a time the way en-US locales do: ``9:05:00 AM``."""
    hour12 = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour12}:{value.minute:02d}:{value.second:02d} {suffix}"


def parse_clock_time(value: str) -> time:
    """Parse ``9:05:00 AM``, ``9:05 PM``, ``19:00`` or ``19:00:30``."""
    if value is None:
        raise ValueError("Invalid time string: None")

    m = _CLOCK_12H.match(value)
    if m:
        hour = int(m.group(1))
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid time string: {value!r}")
        hour %= 12
        if m.group(4).upper() == "PM":
            hour += 12
        return time(hour, int(m.group(2)), int(m.group(3) or 0))

    m = _CLOCK_24H.match(value)
    if m:
        return time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))

    raise ValueError(f"Invalid time string: {value!r}")
