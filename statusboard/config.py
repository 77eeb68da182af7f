"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables. It centralises the runtime
knobs of the availability engine: the workday boundary used by the status
classifier, the working hours and result caps used by slot search, and the
degraded-mode switch for slot fetches.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .timeutil import to_minutes


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. Every value has a
    default matching the behaviour teams already rely on, so the service
    starts with an empty environment.
    """

    # Status classification
    workday_end: str = Field(
        default="18:00",
        alias="WORKDAY_END",
        description=(
            "End-of-workday boundary (HH:MM). A user who is busy now but whose "
            "last block ends before this time is shown as yellow rather than red."
        ),
    )
    soon_minutes: int = Field(
        default=30,
        alias="SOON_MINUTES",
        description="Minutes before a busy block when a free user is already shown as yellow.",
    )

    # Slot search
    work_start_hour: int = Field(default=9, alias="WORK_START_HOUR")
    work_end_hour: int = Field(default=18, alias="WORK_END_HOUR")
    default_min_duration: int = Field(
        default=15,
        alias="DEFAULT_MIN_DURATION",
        description="Minimum slot length in minutes when the caller does not provide one.",
    )
    default_days_ahead: int = Field(
        default=2,
        alias="DEFAULT_DAYS_AHEAD",
        description="Number of calendar days searched for slots, today included.",
    )
    max_days_ahead: int = Field(
        default=31,
        alias="MAX_DAYS_AHEAD",
        description="Largest daysAhead a slot search accepts.",
    )
    quick_sync_max_results: int = Field(default=5, alias="QUICK_SYNC_MAX_RESULTS")
    group_max_results: int = Field(default=8, alias="GROUP_MAX_RESULTS")
    fallback_slots: bool = Field(
        default=True,
        alias="FALLBACK_SLOTS",
        description=(
            "Return locally generated placeholder slots when busy blocks cannot be "
            "fetched, instead of failing the request."
        ),
    )

    # Runtime
    time_zone: str = Field(
        default="UTC",
        alias="TIME_ZONE",
        description="IANA time zone used for the wall clock handed to the classifier.",
    )
    enable_cors: bool = Field(default=False, alias="ENABLE_CORS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("workday_end")
    @classmethod
    def _check_workday_end(cls, value: str) -> str:
        to_minutes(value)
        return value

    @model_validator(mode="after")
    def _check_working_hours(self) -> "Settings":
        if not (0 <= self.work_start_hour < self.work_end_hour <= 24):
            raise ValueError(
                f"working hours must satisfy 0 <= start < end <= 24 "
                f"(got {self.work_start_hour}-{self.work_end_hour})"
            )
        return self

    def max_results_for(self, participant_count: int) -> int:
        """Return the result cap for a search over ``participant_count`` people."""
        if participant_count <= 2:
            return self.quick_sync_max_results
        return self.group_max_results


# Instantiate settings at module import time. This allows other modules to
# import ``settings`` directly without repeatedly reading environment variables.
settings = Settings()
