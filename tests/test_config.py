import pytest
from pydantic import ValidationError

from statusboard.config import Settings


def test_defaults():
    config = Settings()
    assert config.workday_end == "18:00"
    assert config.soon_minutes == 30
    assert (config.work_start_hour, config.work_end_hour) == (9, 18)
    assert config.fallback_slots is True
    assert config.max_days_ahead == 31


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("WORKDAY_END", "17:30")
    monkeypatch.setenv("GROUP_MAX_RESULTS", "12")
    monkeypatch.setenv("FALLBACK_SLOTS", "false")

    config = Settings()

    assert config.workday_end == "17:30"
    assert config.group_max_results == 12
    assert config.fallback_slots is False


def test_max_results_depends_on_group_size():
    config = Settings()
    assert config.max_results_for(2) == 5
    assert config.max_results_for(3) == 8


def test_malformed_workday_end_is_rejected():
    with pytest.raises(ValidationError):
        Settings(WORKDAY_END="6pm")


@pytest.mark.parametrize(
    "start, end",
    [(18, 9), (9, 9), (-1, 18), (9, 25)],
)
def test_invalid_working_hours_are_rejected(start, end):
    with pytest.raises(ValidationError):
        Settings(WORK_START_HOUR=start, WORK_END_HOUR=end)


def test_full_day_working_hours_are_accepted():
    config = Settings(WORK_START_HOUR=0, WORK_END_HOUR=24)
    assert (config.work_start_hour, config.work_end_hour) == (0, 24)
