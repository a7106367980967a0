from __future__ import annotations

import pytest

from dataset import generate_dataset
from engine import RaceSettings, Session, Timeline, create_race, run_steps


def make_session(cap: int = 5000, interval: int = 20, size: int = 40) -> Session:
    data = generate_dataset(size, "reversed", 3)
    settings = RaceSettings(size=size, pattern="reversed", history_cap=cap, checkpoint_interval=interval)
    return Session.create(data, seed=3, left="bubble", right="insertion", settings=settings)


def test_rejects_non_positive_settings() -> None:
    race = create_race([2, 1], 0, "bubble", "bubble")
    with pytest.raises(ValueError):
        Timeline(race, history_cap=0)
    with pytest.raises(ValueError):
        Timeline(race, checkpoint_interval=0)


def test_every_recorded_step_matches_direct_execution() -> None:
    session = make_session(interval=4)
    reference = session.race
    batch_ends = []

    for _ in range(10):
        reference, entries = run_steps(reference, 5, 3)
        session.advance(5, 3)
        batch_ends.append((session.timeline.latest_step, reference))
        assert session.race == reference

    for step, expected in batch_ends:
        assert session.timeline.race_at(step) == expected


def test_checkpoints_only_change_speed_not_answers() -> None:
    session = make_session(interval=4)
    for _ in range(6):
        session.advance(7, 2)

    timeline = session.timeline
    with_checkpoints = [timeline.race_at(s) for s in range(timeline.latest_step + 1)]
    timeline.drop_checkpoints()
    assert [c.step for c in timeline.checkpoints] == [0]
    assert [timeline.race_at(s) for s in range(timeline.latest_step + 1)] == with_checkpoints


def test_checkpoints_follow_the_interval() -> None:
    session = make_session(interval=5)
    session.advance(12, 12)
    assert [c.step for c in session.timeline.checkpoints] == [0, 5, 10]


def test_race_at_returns_independent_copies() -> None:
    session = make_session()
    session.advance(3, 3)
    first = session.timeline.race_at(2)
    first.left.state.array[0] = -1
    assert session.timeline.race_at(2).left.state.array[0] != -1


def test_advancing_from_history_truncates_the_future() -> None:
    session = make_session(interval=3)
    for _ in range(10):
        session.step()
    assert session.timeline.latest_step == 10

    session.scrub(4)
    assert not session.timeline.is_live

    recorded = session.advance(2, 0)

    timeline = session.timeline
    assert recorded == 2
    assert timeline.latest_step == 6
    assert timeline.cursor_step == 6
    assert len(timeline.entries) == 6
    assert all(c.step <= 6 for c in timeline.checkpoints)
    assert timeline.entry_at(5).did_right_step is False
    assert timeline.entry_at(6).did_left_step is True
    assert session.race.left.state.metrics.steps == 6
    assert session.race.right.state.metrics.steps == 4


def test_truncate_future_at_the_present_does_nothing() -> None:
    session = make_session()
    session.advance(3, 3)
    assert session.timeline.truncate_future() == 0
    assert session.timeline.latest_step == 3


def test_history_cap_evicts_the_oldest_ticks() -> None:
    session = make_session(cap=7, interval=3)
    initial = session.race
    for _ in range(30):
        session.step()

    timeline = session.timeline
    assert timeline.latest_step == 30
    assert timeline.base_step == 23
    assert len(timeline.entries) == 7
    assert [c.step for c in timeline.checkpoints] == [23, 24, 27, 30]

    expected_base, _ = run_steps(initial, 23, 23)
    assert timeline.race_at(23) == expected_base
    assert timeline.base_race == expected_base
    assert timeline.race_at(0) == expected_base
    assert timeline.race_at(30) == session.race
    assert timeline.entry_at(23) is None
    assert timeline.entry_at(24) is not None


def test_scrub_clamps_to_retained_range() -> None:
    session = make_session(cap=5)
    for _ in range(8):
        session.step()

    timeline = session.timeline
    assert timeline.clamp(-10) == 3
    assert timeline.clamp(10_000) == 8

    session.scrub(0)
    assert timeline.cursor_step == 3
    session.scrub(99)
    assert timeline.cursor_step == 8


def test_append_with_no_entries_changes_nothing() -> None:
    session = make_session()
    timeline = session.timeline
    race = timeline.append(session.race, [])
    assert race is session.race
    assert timeline.latest_step == 0
    assert timeline.entries == []


def test_entry_at_maps_steps_to_ticks() -> None:
    session = make_session()
    session.advance(2, 1)

    timeline = session.timeline
    assert timeline.entry_at(0) is None
    assert timeline.entry_at(1).did_right_step is True
    assert timeline.entry_at(2).did_right_step is False
    assert timeline.entry_at(3) is None
    assert timeline.active_entry == timeline.entry_at(2)


def test_bounds_report_live_state() -> None:
    session = make_session(cap=100)
    session.advance(4, 4)
    session.scrub(1)
    assert session.timeline.bounds() == {
        "base_step": 0,
        "latest_step": 4,
        "cursor_step": 1,
        "history_cap": 100,
        "is_live": False,
    }
