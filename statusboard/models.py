"""Pydantic data models used by the availability engine and its API.

These models define the shape of busy blocks, status snapshots and meeting
slots, along with the request and response bodies of the HTTP boundaries.
Field names follow the JSON the dashboard already speaks, so they are used
as-is on the Python side too.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .timeutil import to_minutes


class StatusColor(str, Enum):
    """Traffic-light summary of a person's availability."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class BusyBlock(BaseModel):
    """One contiguous busy interval within a single day."""

    start: str
    end: str
    label: str = ""
    source: Literal["voice", "calendar"] = "voice"

    @field_validator("start", "end")
    @classmethod
    def _check_time(cls, value: str) -> str:
        to_minutes(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "BusyBlock":
        if to_minutes(self.start) >= to_minutes(self.end):
            raise ValueError(f"busy block must start before it ends ({self.start}-{self.end})")
        return self


class Classification(BaseModel):
    """Result of classifying one person's current availability."""

    color: StatusColor
    message: str


class StatusUpdate(BaseModel):
    """A status submission, either parsed from a voice transcript or typed in."""

    tasks: List[str] = []
    busyBlocks: List[BusyBlock] = []
    freeAfter: Optional[str] = None
    freeUntil: Optional[str] = None
    blockers: List[str] = []
    rawTranscript: str = ""
    confidenceScore: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("freeAfter", "freeUntil")
    @classmethod
    def _check_optional_time(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            to_minutes(value)
        return value


class StatusSnapshot(BaseModel):
    """The single current status record of one user."""

    userId: str
    tasks: List[str] = []
    busyBlocks: List[BusyBlock] = []
    freeAfter: Optional[str] = None
    freeUntil: Optional[str] = None
    blockers: List[str] = []
    rawTranscript: str = ""
    confidenceScore: float = 1.0
    statusColor: StatusColor
    message: str
    lastUpdated: datetime


class AvailableSlot(BaseModel):
    """A candidate meeting window where every requested participant is free."""

    start: datetime
    end: datetime
    durationMinutes: int
    participantsFree: List[str]


class SlotSearchRequest(BaseModel):
    """Body of the slot-search boundary."""

    userIds: List[str]
    minDuration: Optional[int] = None
    daysAhead: Optional[int] = None
    maxResults: Optional[int] = None
    requesterId: Optional[str] = None


class SlotSearchResult(BaseModel):
    """Slots found for a search.

    ``noCommonAvailability`` marks a valid empty answer; ``degraded`` marks
    placeholder slots produced because busy blocks could not be fetched, in
    which case ``lastError`` carries the reason for the dashboard banner.
    """

    slots: List[AvailableSlot]
    count: int
    noCommonAvailability: bool = False
    degraded: bool = False
    lastError: Optional[str] = None


class AvailabilityCheckRequest(BaseModel):
    """Body of the availability check for one concrete window."""

    userIds: List[str]
    start: datetime
    end: datetime


class AvailabilityCheckResult(BaseModel):
    available: bool
    conflictingUsers: List[str] = []


class BookingRequest(BaseModel):
    """A chosen slot plus the details of the meeting to create."""

    participantIds: List[str]
    start: datetime
    durationMinutes: int
    title: str
    notes: Optional[str] = None


class Meeting(BaseModel):
    """A booked meeting as recorded by the store."""

    id: str
    title: str
    organizerId: str
    participantIds: List[str]
    start: datetime
    end: datetime
    durationMinutes: int
    status: Literal["scheduled", "completed", "cancelled"] = "scheduled"
    notes: Optional[str] = None
    createdAt: datetime
