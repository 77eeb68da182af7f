"""Persistence collaborator for status snapshots and meetings.

The availability engine does not own storage. ``StatusStore`` is the
contract the service boundaries talk to; ``InMemoryStatusStore`` is a
process-local implementation guarded by a threading lock, used by the
default application and by tests. Hosted backends implement the same
methods and raise ``StoreError`` on I/O failures.

Snapshots are replaced wholesale on every write (last write wins); there is
no history. Overlapping meetings for the same person are refused with
``BookingConflict``, since "read slots, then book" is not atomic.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, List, Optional, Protocol, Sequence

from .errors import BookingConflict
from .models import BusyBlock, Meeting, StatusSnapshot

logger = logging.getLogger(__name__)


class StatusStore(Protocol):
    def get_snapshot(self, user_id: str) -> Optional[StatusSnapshot]:
        ...

    def list_snapshots(self) -> List[StatusSnapshot]:
        ...

    def put_snapshot(self, snapshot: StatusSnapshot) -> StatusSnapshot:
        ...

    def busy_blocks_for(self, user_ids: Sequence[str]) -> Dict[str, List[BusyBlock]]:
        ...

    def create_meeting(self, meeting: Meeting) -> Meeting:
        ...

    def new_meeting_id(self) -> str:
        ...

    def list_meetings(self) -> List[Meeting]:
        ...


class InMemoryStatusStore:
    """Keep snapshots and meetings in process memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: Dict[str, StatusSnapshot] = {}
        self._meetings: Dict[str, Meeting] = {}

    def get_snapshot(self, user_id: str) -> Optional[StatusSnapshot]:
        with self._lock:
            return self._snapshots.get(user_id)

    def list_snapshots(self) -> List[StatusSnapshot]:
        with self._lock:
            return sorted(self._snapshots.values(), key=lambda s: s.userId)

    def put_snapshot(self, snapshot: StatusSnapshot) -> StatusSnapshot:
        with self._lock:
            self._snapshots[snapshot.userId] = snapshot
        return snapshot

    def busy_blocks_for(self, user_ids: Sequence[str]) -> Dict[str, List[BusyBlock]]:
        """Return each user's current busy blocks; users with no snapshot get none."""
        with self._lock:
            return {
                uid: list(self._snapshots[uid].busyBlocks) if uid in self._snapshots else []
                for uid in user_ids
            }

    def new_meeting_id(self) -> str:
        return str(uuid.uuid4())

    def create_meeting(self, meeting: Meeting) -> Meeting:
        attendees = {meeting.organizerId, *meeting.participantIds}
        with self._lock:
            for existing in self._meetings.values():
                if existing.status != "scheduled":
                    continue
                if not attendees & {existing.organizerId, *existing.participantIds}:
                    continue
                if existing.start < meeting.end and meeting.start < existing.end:
                    logger.warning("Refusing meeting %s: overlaps %s", meeting.id, existing.id)
                    raise BookingConflict(f"overlaps meeting {existing.id}")
            self._meetings[meeting.id] = meeting
        return meeting

    def list_meetings(self) -> List[Meeting]:
        with self._lock:
            return sorted(self._meetings.values(), key=lambda m: m.start)
