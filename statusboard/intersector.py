"""Free-time intersection across several participants' calendars.

This is pure interval arithmetic on minutes since midnight: no clock, no
I/O and no fallback behaviour. The algorithm:

1. Normalise each participant's busy blocks into sorted, merged intervals.
2. Union those intervals across participants, since a meeting needs every
   participant free.
3. For each day of the horizon, clip the working hours (today: from the
   search start onwards) and subtract the union to get free gaps.
4. Keep gaps of at least ``min_duration_minutes`` and emit them earliest
   first, stopping at ``max_results``.

Busy blocks describe the first day of the search only; a status snapshot
is a one-day record, so later days are free for their whole working hours.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidRequest
from .models import AvailableSlot, BusyBlock
from .timeutil import MINUTES_PER_DAY, at_minute, minute_of_day, to_minutes

Interval = Tuple[int, int]

MAX_DAYS_AHEAD = 31


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Sort ``intervals`` and merge the ones that overlap or touch."""
    merged: List[Interval] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
        else:
            merged.append((start, end))
    return merged


def busy_intervals(blocks: Iterable[BusyBlock]) -> List[Interval]:
    """Return the merged busy intervals of one participant."""
    return merge_intervals((to_minutes(b.start), to_minutes(b.end)) for b in blocks)


def union_busy(busy_by_participant: Mapping[str, Sequence[BusyBlock]]) -> List[Interval]:
    """Return the merged union of every participant's busy intervals."""
    per_participant = [busy_intervals(blocks) for blocks in busy_by_participant.values()]
    return merge_intervals(iv for intervals in per_participant for iv in intervals)


def subtract_busy(window: Interval, busy: Sequence[Interval]) -> List[Interval]:
    """Return the parts of ``window`` not covered by the merged ``busy`` intervals."""
    window_start, window_end = window
    gaps: List[Interval] = []
    cursor = window_start
    for start, end in busy:
        if end <= cursor:
            continue
        if start >= window_end:
            break
        if start > cursor:
            gaps.append((cursor, start))
        cursor = max(cursor, end)
    if cursor < window_end:
        gaps.append((cursor, window_end))
    return gaps


def validate_search(
    participant_ids: Sequence[str],
    min_duration_minutes: int,
    work_start_hour: int,
    work_end_hour: int,
    days_ahead: int,
    max_results: Optional[int],
    max_days_ahead: int = MAX_DAYS_AHEAD,
) -> None:
    """Check slot-search arguments, raising ``InvalidRequest`` on the first violation."""
    if not participant_ids:
        raise InvalidRequest("at least one participant is required")
    if min_duration_minutes <= 0:
        raise InvalidRequest("minimum duration must be at least 1 minute")
    if not (0 <= work_start_hour < work_end_hour <= 24):
        raise InvalidRequest(
            f"working hours must satisfy 0 <= start < end <= 24 (got {work_start_hour}-{work_end_hour})"
        )
    if min_duration_minutes > (work_end_hour - work_start_hour) * 60:
        raise InvalidRequest(
            f"minimum duration of {min_duration_minutes} minutes exceeds the "
            f"{work_start_hour}:00-{work_end_hour}:00 working day"
        )
    if days_ahead < 1:
        raise InvalidRequest("daysAhead must be at least 1")
    if days_ahead > max_days_ahead:
        raise InvalidRequest(f"daysAhead must be at most {max_days_ahead}")
    if max_results is not None and max_results < 1:
        raise InvalidRequest("maxResults must be at least 1")


def find_slots(
    busy_by_participant: Mapping[str, Sequence[BusyBlock]],
    min_duration_minutes: int,
    *,
    start: datetime,
    work_start_hour: int = 9,
    work_end_hour: int = 18,
    days_ahead: int = 1,
    max_results: Optional[int] = None,
    max_days_ahead: int = MAX_DAYS_AHEAD,
) -> List[AvailableSlot]:
    """Find windows where every participant is free, earliest first.

    Args:
        busy_by_participant: busy blocks for the first search day, keyed by
            participant id. A participant with no blocks is free all day.
        min_duration_minutes: shortest gap worth returning.
        start: the moment the search begins; its date is day one and its
            tzinfo is carried onto the returned slots.
        work_start_hour: first working hour of each day.
        work_end_hour: hour each working day ends (24 means midnight).
        days_ahead: number of calendar days searched, starting with ``start``'s.
        max_results: cap on the number of slots returned; ``None`` for no cap.
        max_days_ahead: largest accepted ``days_ahead``.

    Returns:
        A possibly empty list of slots. Each slot covers a whole free gap, so
        ``durationMinutes`` may exceed ``min_duration_minutes``.

    Raises:
        InvalidRequest: if the arguments violate the search contract.
    """
    participants = list(busy_by_participant.keys())
    validate_search(
        participants,
        min_duration_minutes,
        work_start_hour,
        work_end_hour,
        days_ahead,
        max_results,
        max_days_ahead,
    )

    busy = union_busy(busy_by_participant)
    day_window = (work_start_hour * 60, min(work_end_hour * 60, MINUTES_PER_DAY))

    slots: List[AvailableSlot] = []
    for offset in range(days_ahead):
        day = start + timedelta(days=offset)
        if offset == 0:
            window = (max(day_window[0], minute_of_day(start)), day_window[1])
            gaps = subtract_busy(window, busy) if window[0] < window[1] else []
        else:
            gaps = [day_window]

        for gap_start, gap_end in gaps:
            length = gap_end - gap_start
            if length < min_duration_minutes:
                continue
            slots.append(
                AvailableSlot(
                    start=at_minute(day, gap_start),
                    end=at_minute(day, gap_end),
                    durationMinutes=length,
                    participantsFree=list(participants),
                )
            )
            if max_results is not None and len(slots) >= max_results:
                return slots
    return slots


def check_availability(
    busy_by_participant: Mapping[str, Sequence[BusyBlock]],
    start_minute: int,
    end_minute: int,
) -> Tuple[bool, List[str]]:
    """Return whether everyone is free in ``[start_minute, end_minute)`` and who is not."""
    if start_minute >= end_minute:
        raise InvalidRequest("window must start before it ends")
    conflicting = [
        user_id
        for user_id, blocks in busy_by_participant.items()
        if any(s < end_minute and e > start_minute for s, e in busy_intervals(blocks))
    ]
    return not conflicting, conflicting
