"""Degraded-mode slot strategies.

When busy blocks cannot be fetched from the store, the slot-search boundary
asks a fallback strategy for something to show instead of an empty picker.
``PlaceholderSlots`` synthesises plausible slots inside working hours;
``NoFallback`` declines, letting the store error reach the caller.

The intersector never sees these: it is only ever given real busy data.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import List, Optional, Protocol, Sequence

from .models import AvailableSlot


class SlotFallback(Protocol):
    """Strategy consulted when a slot fetch fails."""

    def slots(
        self,
        participant_ids: Sequence[str],
        min_duration_minutes: int,
        now: datetime,
        max_results: int,
    ) -> Optional[List[AvailableSlot]]:
        """Return placeholder slots, or ``None`` to let the failure propagate."""


class NoFallback:
    """Never substitutes slots; fetch failures are reported to the caller."""

    def slots(self, participant_ids, min_duration_minutes, now, max_results):
        return None


class PlaceholderSlots:
    """Generate pseudo-random slots within working hours.

    Starting from the next whole hour, each slot lasts
    ``max(min_duration, 60..119)`` minutes, is clipped to the end of the
    working day and is followed by a 60-180 minute pretend-busy gap. When
    too little of the day is left for ``min_duration``, generation moves on
    to the next working day, for at most ``max_days`` days. Pass a seeded
    ``random.Random`` for reproducible output.
    """

    def __init__(
        self,
        work_start_hour: int = 9,
        work_end_hour: int = 18,
        rng: Optional[random.Random] = None,
        max_days: int = 14,
    ) -> None:
        self.work_start_hour = work_start_hour
        self.work_end_hour = work_end_hour
        self.rng = rng or random.Random()
        self.max_days = max_days

    def _day_bounds(self, moment: datetime):
        midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        return (
            midnight + timedelta(hours=self.work_start_hour),
            midnight + timedelta(hours=self.work_end_hour),
        )

    def slots(
        self,
        participant_ids: Sequence[str],
        min_duration_minutes: int,
        now: datetime,
        max_results: int,
    ) -> Optional[List[AvailableSlot]]:
        result: List[AvailableSlot] = []
        current = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        horizon = current + timedelta(days=self.max_days)

        while len(result) < max_results and current < horizon:
            day_start, day_end = self._day_bounds(current)
            if current < day_start:
                current = day_start
            elif current >= day_end:
                current = self._day_bounds(current + timedelta(days=1))[0]
                continue

            length = max(min_duration_minutes, 60 + self.rng.randint(0, 59))
            end = min(current + timedelta(minutes=length), day_end)
            duration = int((end - current).total_seconds() // 60)
            if duration < min_duration_minutes:
                current = day_end
                continue

            result.append(
                AvailableSlot(
                    start=current,
                    end=end,
                    durationMinutes=duration,
                    participantsFree=list(participant_ids),
                )
            )
            current = end + timedelta(minutes=60 + self.rng.randint(0, 120))

        # Nothing fits: let the fetch failure surface instead of an empty picker.
        return result or None
