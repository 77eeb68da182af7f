import random
from datetime import timedelta

from statusboard.fallback import NoFallback, PlaceholderSlots
from tests.helpers import MONDAY, at


def test_no_fallback_declines():
    assert NoFallback().slots(["alice"], 30, at("10:00"), 5) is None


def test_placeholder_slots_start_at_next_hour_within_working_hours():
    slots = PlaceholderSlots(rng=random.Random(7)).slots(["alice", "bob"], 15, at("10:15"), 5)

    assert len(slots) == 5
    assert slots[0].start == at("11:00")
    for slot in slots:
        assert slot.durationMinutes >= 15
        assert slot.participantsFree == ["alice", "bob"]
        assert slot.end - slot.start == timedelta(minutes=slot.durationMinutes)
        assert 9 <= slot.start.hour < 18
        assert slot.end <= slot.start.replace(hour=18, minute=0)
    assert all(a.end < b.start for a, b in zip(slots, slots[1:]))


def test_placeholder_slots_are_reproducible_with_a_seed():
    first = PlaceholderSlots(rng=random.Random(42)).slots(["a", "b", "c"], 30, at("08:20"), 8)
    second = PlaceholderSlots(rng=random.Random(42)).slots(["a", "b", "c"], 30, at("08:20"), 8)
    assert first == second


def test_placeholder_slots_honour_minimum_duration():
    slots = PlaceholderSlots(rng=random.Random(3)).slots(["a"], 150, at("07:00"), 4)
    assert slots
    assert all(s.durationMinutes >= 150 for s in slots)
    assert slots[0].start == at("09:00")
    assert slots[0].durationMinutes == 150


def test_placeholder_slots_skip_to_next_working_day():
    slots = PlaceholderSlots(rng=random.Random(1)).slots(["a"], 15, at("20:00"), 1)
    assert slots[0].start == at("09:00", MONDAY + timedelta(days=1))


def test_placeholder_slots_use_configured_hours():
    slots = PlaceholderSlots(work_start_hour=13, work_end_hour=15, rng=random.Random(5)).slots(
        ["a"], 15, at("08:00"), 3
    )
    assert slots[0].start == at("13:00")
    assert all(13 <= s.start.hour < 15 for s in slots)


def test_placeholder_slots_fill_the_cap_across_days():
    slots = PlaceholderSlots(rng=random.Random(9)).slots(["a", "b", "c"], 240, at("16:30"), 8)

    assert len(slots) == 8
    assert slots[0].start == at("09:00", MONDAY + timedelta(days=1))
    assert all(s.durationMinutes >= 240 for s in slots)


def test_placeholder_slots_decline_when_nothing_fits():
    assert PlaceholderSlots(rng=random.Random(4)).slots(["a"], 600, at("08:00"), 5) is None
    short_day = PlaceholderSlots(work_start_hour=9, work_end_hour=10, max_days=3, rng=random.Random(4))
    assert short_day.slots(["a"], 61, at("08:00"), 5) is None
