"""Helpers for wall-clock times of day.

Busy blocks and "free after" markers travel as zero-padded ``HH:MM``
strings. Every comparison inside the engine happens on minutes since
midnight, so these helpers are the only place that knows the string form.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from .errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight.

    Raises:
        InvalidTimeFormat: if ``value`` is not a zero-padded 24h time.
    """
    match = _HHMM.match(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidTimeFormat(f"expected HH:MM, got {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as ``HH:MM`` (clamped to the same day)."""
    minutes = max(0, min(minutes, MINUTES_PER_DAY - 1))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_of_day(moment: datetime) -> str:
    """Return the wall-clock ``HH:MM`` of ``moment``."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


def minute_of_day(moment: datetime) -> int:
    """Return the minute of day of ``moment``, rounded up to the next whole minute."""
    minutes = moment.hour * 60 + moment.minute
    if moment.second or moment.microsecond:
        minutes += 1
    return minutes


def at_minute(moment: datetime, minutes: int) -> datetime:
    """Return midnight of ``moment``'s day plus ``minutes``, keeping its tzinfo."""
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight + timedelta(minutes=minutes)
