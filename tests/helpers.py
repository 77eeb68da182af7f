"""Test helpers for building times, busy blocks and stores."""

from datetime import datetime, timezone

from statusboard.errors import StoreError
from statusboard.models import BusyBlock
from statusboard.store import InMemoryStatusStore

MONDAY = datetime(2025, 3, 10, tzinfo=timezone.utc)


def at(hhmm: str, day: datetime = MONDAY) -> datetime:
    """Return ``day`` at wall-clock ``hhmm``."""
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return day.replace(hour=hours, minute=minutes)


def block(start: str, end: str, label: str = "busy", source: str = "voice") -> BusyBlock:
    return BusyBlock(start=start, end=end, label=label, source=source)


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FailingStore(InMemoryStatusStore):
    """Store whose busy-block reads always fail."""

    def busy_blocks_for(self, user_ids):
        raise StoreError("connection reset by peer")
