"""Service boundaries around the availability engine.

``AvailabilityService`` is where the pure classifier and intersector meet
their collaborators: the status store, the wall clock and the degraded-mode
slot strategy. It implements three boundaries:

- status save: classify the submitted blocks and replace the user's snapshot;
- slot search: fetch everyone's busy blocks and intersect them, falling back
  to placeholder slots when the fetch fails;
- booking: record a meeting and add it to each attendee's busy blocks.

Colors are always recomputed here at write time; a color sent by a client is
never stored.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .classifier import classify
from .config import Settings, settings as default_settings
from .errors import InvalidRequest, StoreError
from .fallback import NoFallback, SlotFallback
from .intersector import check_availability, find_slots, validate_search
from .models import (
    AvailabilityCheckRequest,
    AvailabilityCheckResult,
    BookingRequest,
    BusyBlock,
    Meeting,
    SlotSearchRequest,
    SlotSearchResult,
    StatusSnapshot,
    StatusUpdate,
)
from .store import StatusStore
from .timeutil import MINUTES_PER_DAY, format_minutes, time_of_day

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def _dedupe(ids: Sequence[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for uid in ids:
        seen.setdefault(uid, None)
    return list(seen)


class AvailabilityService:
    """Wire the availability engine to a store, a clock and a fallback policy."""

    def __init__(
        self,
        store: StatusStore,
        *,
        config: Optional[Settings] = None,
        fallback: Optional[SlotFallback] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self.fallback = fallback or NoFallback()
        self.clock = clock or _utcnow

    # ------------------------------------------------------------------
    # Status

    def _snapshot(self, user_id: str, update: StatusUpdate, now: datetime) -> StatusSnapshot:
        result = classify(
            update.busyBlocks,
            update.blockers,
            update.freeAfter,
            time_of_day(now),
            workday_end=self.config.workday_end,
            soon_minutes=self.config.soon_minutes,
        )
        return StatusSnapshot(
            userId=user_id,
            tasks=list(update.tasks),
            busyBlocks=list(update.busyBlocks),
            freeAfter=update.freeAfter,
            freeUntil=update.freeUntil,
            blockers=list(update.blockers),
            rawTranscript=update.rawTranscript,
            confidenceScore=update.confidenceScore,
            statusColor=result.color,
            message=result.message,
            lastUpdated=now,
        )

    def save_status(self, user_id: str, update: StatusUpdate) -> StatusSnapshot:
        """Classify ``update`` and store it as ``user_id``'s only snapshot.

        Raises:
            InvalidRequest: if ``user_id`` is empty.
            StoreError: if the store rejects the write. There is no retry.
        """
        if not user_id:
            raise InvalidRequest("user id is required")
        snapshot = self._snapshot(user_id, update, self.clock())
        stored = self.store.put_snapshot(snapshot)
        logger.info(
            "Saved status for %s: %s (%d blocks, %d blockers)",
            user_id,
            stored.statusColor.value,
            len(stored.busyBlocks),
            len(stored.blockers),
        )
        return stored

    def get_status(self, user_id: str) -> Optional[StatusSnapshot]:
        return self.store.get_snapshot(user_id)

    def team_status(self) -> List[StatusSnapshot]:
        return self.store.list_snapshots()

    # ------------------------------------------------------------------
    # Slots

    def _participants(self, user_ids: Sequence[str], requester_id: Optional[str]) -> List[str]:
        ids = [uid for uid in user_ids if uid]
        if requester_id and requester_id not in ids:
            ids.append(requester_id)
        return _dedupe(ids)

    def search_slots(self, request: SlotSearchRequest) -> SlotSearchResult:
        """Find common free slots for the requested users.

        An empty result is valid and flagged with ``noCommonAvailability``.
        If busy blocks cannot be fetched, the configured fallback may supply
        placeholder slots; the result is then flagged ``degraded`` and carries
        the error in ``lastError``.

        Raises:
            InvalidRequest: if the request violates the search contract.
            StoreError: if the fetch fails and the fallback declines.
        """
        participants = self._participants(request.userIds, request.requesterId)
        min_duration = (
            request.minDuration if request.minDuration is not None else self.config.default_min_duration
        )
        days_ahead = request.daysAhead if request.daysAhead is not None else self.config.default_days_ahead
        max_results = (
            request.maxResults
            if request.maxResults is not None
            else self.config.max_results_for(len(participants))
        )
        validate_search(
            participants,
            min_duration,
            self.config.work_start_hour,
            self.config.work_end_hour,
            days_ahead,
            max_results,
            self.config.max_days_ahead,
        )

        now = self.clock()
        logger.info(
            "Searching slots for %s (min %d min, %d days, cap %d)",
            ", ".join(participants),
            min_duration,
            days_ahead,
            max_results,
        )
        try:
            busy = self.store.busy_blocks_for(participants)
        except StoreError as exc:
            logger.exception("Error fetching busy blocks: %s", exc)
            placeholders = self.fallback.slots(participants, min_duration, now, max_results)
            if placeholders is None:
                raise
            logger.warning("Serving %d placeholder slots", len(placeholders))
            return SlotSearchResult(
                slots=placeholders,
                count=len(placeholders),
                degraded=True,
                lastError=f"SLOTS_ERROR: {exc}",
            )

        busy = {uid: busy.get(uid, []) for uid in participants}
        slots = find_slots(
            busy,
            min_duration,
            start=now,
            work_start_hour=self.config.work_start_hour,
            work_end_hour=self.config.work_end_hour,
            days_ahead=days_ahead,
            max_results=max_results,
            max_days_ahead=self.config.max_days_ahead,
        )
        logger.info("Found %d slots", len(slots))
        return SlotSearchResult(slots=slots, count=len(slots), noCommonAvailability=not slots)

    def _local_window(self, start: datetime, end: datetime, now: datetime) -> Tuple[int, int]:
        """Map ``[start, end)`` onto today's minutes, clamping to the day."""
        local_start = self._to_local(start, now)
        local_end = self._to_local(end, now)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_min = int((local_start - midnight).total_seconds() // 60)
        end_min = int((local_end - midnight).total_seconds() // 60)
        return max(0, start_min), min(MINUTES_PER_DAY, end_min)

    @staticmethod
    def _to_local(moment: datetime, now: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=now.tzinfo)
        return moment.astimezone(now.tzinfo)

    def check_availability(self, request: AvailabilityCheckRequest) -> AvailabilityCheckResult:
        """Report which of the users are busy during a window that falls today."""
        participants = _dedupe([uid for uid in request.userIds if uid])
        if not participants:
            raise InvalidRequest("at least one participant is required")
        now = self.clock()
        start = self._to_local(request.start, now)
        end = self._to_local(request.end, now)
        if start >= end:
            raise InvalidRequest("window must start before it ends")
        start_min, end_min = self._local_window(start, end, now)
        if start_min >= end_min:
            # Entirely outside today: snapshots carry no blocks for other days.
            return AvailabilityCheckResult(available=True)
        busy = self.store.busy_blocks_for(participants)
        available, conflicting = check_availability(busy, start_min, end_min)
        return AvailabilityCheckResult(available=available, conflictingUsers=conflicting)

    # ------------------------------------------------------------------
    # Booking

    def _add_busy_block(self, user_id: str, block: BusyBlock, now: datetime) -> None:
        current = self.store.get_snapshot(user_id)
        if current is None:
            update = StatusUpdate(busyBlocks=[block])
        else:
            update = StatusUpdate(
                tasks=current.tasks,
                busyBlocks=[*current.busyBlocks, block],
                freeAfter=current.freeAfter,
                freeUntil=current.freeUntil,
                blockers=current.blockers,
                rawTranscript=current.rawTranscript,
                confidenceScore=current.confidenceScore,
            )
        self.store.put_snapshot(self._snapshot(user_id, update, now))

    def book_meeting(self, organizer_id: str, request: BookingRequest) -> Meeting:
        """Record a meeting and block the time on every attendee's status.

        The meeting record is authoritative. Adding its busy block to each
        attendee's snapshot is a read-modify-write done per attendee outside
        the store's lock: a concurrent status save can overwrite it, and a
        store failure for one attendee is logged and does not undo the meeting
        or the other attendees' updates.

        Raises:
            InvalidRequest: if the booking is malformed.
            BookingConflict: if the store already holds an overlapping meeting.
        """
        if not organizer_id:
            raise InvalidRequest("organizer id is required")
        participants = [uid for uid in _dedupe(request.participantIds) if uid and uid != organizer_id]
        if not participants:
            raise InvalidRequest("at least one participant other than the organizer is required")
        if request.durationMinutes <= 0:
            raise InvalidRequest("duration must be at least 1 minute")
        if not request.title.strip():
            raise InvalidRequest("meeting title is required")

        now = self.clock()
        start = self._to_local(request.start, now)
        end = start + timedelta(minutes=request.durationMinutes)
        meeting = self.store.create_meeting(
            Meeting(
                id=self.store.new_meeting_id(),
                title=request.title.strip(),
                organizerId=organizer_id,
                participantIds=participants,
                start=start,
                end=end,
                durationMinutes=request.durationMinutes,
                notes=request.notes,
                createdAt=now,
            )
        )
        logger.info("Booked meeting %s for %s at %s", meeting.id, organizer_id, start.isoformat())

        if start.date() != now.date():
            logger.info("Meeting %s is not today; statuses left unchanged", meeting.id)
            return meeting

        start_min, end_min = self._local_window(start, end, now)
        block_start, block_end = format_minutes(start_min), format_minutes(end_min)
        if block_start >= block_end:
            logger.info("Meeting %s leaves no time today to block", meeting.id)
            return meeting
        block = BusyBlock(
            start=block_start,
            end=block_end,
            label=meeting.title,
            source="calendar",
        )
        for uid in [organizer_id, *participants]:
            try:
                self._add_busy_block(uid, block, now)
            except StoreError as exc:
                logger.exception("Error blocking meeting %s for %s: %s", meeting.id, uid, exc)
        return meeting

    def list_meetings(self) -> List[Meeting]:
        return self.store.list_meetings()
