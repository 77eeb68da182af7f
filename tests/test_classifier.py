import pytest

from statusboard.classifier import classify
from statusboard.errors import InvalidTimeFormat
from statusboard.models import StatusColor
from tests.helpers import block


def result(blocks, blockers=(), free_after=None, now="12:00", **kwargs):
    r = classify(blocks, list(blockers), free_after, now, **kwargs)
    return r.color, r.message


@pytest.mark.parametrize(
    "blocks, free_after",
    [
        ([], None),
        ([block("09:00", "19:00")], None),
        ([block("09:00", "10:00")], "10:00"),
    ],
)
def test_blockers_always_win(blocks, free_after):
    assert result(blocks, ["waiting on design review"], free_after) == (StatusColor.RED, "Blocked")


def test_no_blocks_is_available():
    assert result([]) == (StatusColor.GREEN, "Available now")
    assert result([], free_after="15:00") == (StatusColor.GREEN, "Available now")


def test_busy_now_with_block_ending_before_workday_end():
    assert result([block("09:00", "10:00")], now="09:30") == (StatusColor.YELLOW, "Busy now")
    assert result([block("09:00", "17:00")], now="12:00") == (StatusColor.YELLOW, "Busy now")


def test_busy_past_workday_end_is_busy_all_day():
    assert result([block("09:00", "19:00")], now="12:00") == (StatusColor.RED, "Busy all day")
    assert result([block("09:00", "18:00")], now="12:00") == (StatusColor.RED, "Busy all day")


def test_free_after_turns_busy_all_day_into_busy_now():
    assert result([block("09:00", "19:00")], free_after="13:00") == (StatusColor.YELLOW, "Busy now")


def test_block_ending_now_is_not_busy():
    assert result([block("09:00", "10:00")], now="10:00") == (StatusColor.GREEN, "Available now")


def test_block_starting_now_is_busy():
    assert result([block("10:00", "11:00")], now="10:00") == (StatusColor.YELLOW, "Busy now")


@pytest.mark.parametrize(
    "start, expected",
    [
        ("10:20", StatusColor.YELLOW),
        ("10:30", StatusColor.YELLOW),
        ("10:31", StatusColor.GREEN),
        ("15:00", StatusColor.GREEN),
    ],
)
def test_imminent_block_look_ahead(start, expected):
    color, _ = result([block("08:00", "09:00"), block(start, "16:00")], now="10:00")
    assert color == expected


def test_unsorted_overlapping_blocks():
    blocks = [block("14:00", "15:00"), block("09:00", "12:00"), block("11:00", "19:00")]
    assert result(blocks, now="11:30") == (StatusColor.RED, "Busy all day")
    assert result(blocks, now="08:45") == (StatusColor.YELLOW, "Busy now")
    assert result(blocks, now="19:30") == (StatusColor.GREEN, "Available now")


def test_workday_end_and_look_ahead_are_configurable():
    assert result([block("09:00", "17:00")], workday_end="16:00") == (StatusColor.RED, "Busy all day")
    color, _ = result([block("10:45", "11:00")], now="10:00", soon_minutes=60)
    assert color == StatusColor.YELLOW


def test_classify_is_pure():
    blocks = [block("09:00", "10:00"), block("13:00", "14:00")]
    first = classify(blocks, [], None, "12:40")
    second = classify(blocks, [], None, "12:40")
    assert first == second
    assert first.color == StatusColor.YELLOW


@pytest.mark.parametrize("now", ["9:30", "25:00", ""])
def test_malformed_now_is_rejected(now):
    with pytest.raises(InvalidTimeFormat):
        classify([block("09:00", "10:00")], [], None, now)


def test_malformed_free_after_is_rejected():
    with pytest.raises(InvalidTimeFormat):
        classify([], [], "after lunch", "12:00")
