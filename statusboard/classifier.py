"""Status classification for team member cards.

Derives the traffic-light color shown on a status card from the busy
blocks and blockers a person reported. The rules are checked in priority
order and the first match wins:

1. Any blocker makes the person red ("Blocked").
2. No busy blocks at all makes the person green ("Available now").
3. Busy right now: yellow ("Busy now") when they declared a ``free_after``
   time or their last block ends before the workday boundary, otherwise red
   ("Busy all day").
4. Not busy right now: yellow when the next block starts within the
   look-ahead window, otherwise green.

The current time is passed in by the caller; nothing here reads a clock.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .models import BusyBlock, Classification, StatusColor
from .timeutil import to_minutes

WORKDAY_END = "18:00"
SOON_MINUTES = 30

AVAILABLE = "Available now"
BUSY = "Busy now"
BUSY_ALL_DAY = "Busy all day"
BLOCKED = "Blocked"


def classify(
    busy_blocks: Sequence[BusyBlock],
    blockers: Sequence[str],
    free_after: Optional[str],
    now: str,
    *,
    workday_end: str = WORKDAY_END,
    soon_minutes: int = SOON_MINUTES,
) -> Classification:
    """Classify a person's availability at wall-clock time ``now``.

    Args:
        busy_blocks: today's busy blocks, in any order and possibly overlapping.
        blockers: free-text blockers; any entry forces red.
        free_after: optional ``HH:MM`` the person declared they are free after.
        now: current wall-clock time as ``HH:MM``.
        workday_end: ``HH:MM`` boundary separating "busy now" from "busy all day".
        soon_minutes: look-ahead for an imminent block.

    Raises:
        InvalidTimeFormat: if ``now``, ``free_after`` or ``workday_end`` is not ``HH:MM``.
    """
    now_min = to_minutes(now)
    boundary = to_minutes(workday_end)
    if free_after is not None:
        to_minutes(free_after)

    if blockers:
        return Classification(color=StatusColor.RED, message=BLOCKED)
    if not busy_blocks:
        return Classification(color=StatusColor.GREEN, message=AVAILABLE)

    spans = [(to_minutes(b.start), to_minutes(b.end)) for b in busy_blocks]

    # Half-open: a block ending exactly now is already over.
    busy_now = any(start <= now_min < end for start, end in spans)
    last_end = max(end for _, end in spans)

    if busy_now:
        if free_after or last_end < boundary:
            return Classification(color=StatusColor.YELLOW, message=BUSY)
        return Classification(color=StatusColor.RED, message=BUSY_ALL_DAY)

    if all(end <= now_min for _, end in spans):
        return Classification(color=StatusColor.GREEN, message=AVAILABLE)

    upcoming = [start for start, _ in spans if start > now_min]
    if upcoming and min(upcoming) - now_min <= soon_minutes:
        return Classification(color=StatusColor.YELLOW, message=BUSY)
    return Classification(color=StatusColor.GREEN, message=AVAILABLE)
