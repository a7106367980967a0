from __future__ import annotations

import pytest

from dataset import generate_dataset
from engine import (
    LEFT, RIGHT, create_race, create_runner, execute_tick, is_sorted,
    reset_race, run_steps, step_runner, winner,
)


@pytest.fixture
def small_race():
    # quick needs 4 steps on this input, bubble needs 3
    return create_race([3, 1, 2], seed=1, left="quick", right="bubble")


@pytest.fixture
def long_race():
    return create_race(generate_dataset(40, "reversed", 11), seed=11, left="bubble", right="insertion")


def test_lanes_start_from_independent_copies(small_race) -> None:
    assert small_race.initial_data == (3, 1, 2)
    assert small_race.left.state.array == [3, 1, 2]
    assert small_race.left.state.array is not small_race.right.state.array
    assert small_race.left.finished_at_tick is None


def test_unknown_lane_is_rejected(small_race) -> None:
    with pytest.raises(ValueError, match="Unknown lane"):
        small_race.lane("middle")


def test_create_runner_rejects_unknown_algorithm() -> None:
    with pytest.raises(ValueError):
        create_runner("bogo", [1, 2])


def test_step_runner_records_finish_tick_once() -> None:
    runner = create_runner("quick", [3, 1, 2])
    for _ in range(4):
        runner, did_step, events = step_runner(runner)
        assert did_step is True
        assert events

    assert runner.done is True
    assert runner.finished_at_tick == 4

    again, did_step, events = step_runner(runner)
    assert did_step is False
    assert events == ()
    assert again is runner


def test_step_runner_leaves_input_untouched() -> None:
    runner = create_runner("bubble", [2, 1])
    stepped, _, _ = step_runner(runner)
    assert runner.state.array == [2, 1]
    assert runner.state.metrics.steps == 0
    assert stepped.state.array == [1, 2]


def test_execute_tick_steps_requested_lanes_only(long_race) -> None:
    race, entry = execute_tick(long_race, True, False)

    assert entry.did_left_step is True
    assert entry.did_right_step is False
    assert entry.right_events == ()
    assert race.left.state.metrics.steps == 1
    assert race.right.state.metrics.steps == 0
    assert long_race.left.state.metrics.steps == 0


def test_execute_tick_without_progress_records_nothing(small_race) -> None:
    race, entry = execute_tick(small_race, False, False)
    assert entry is None
    assert race is small_race

    finished, _ = run_steps(small_race, 10, 10)
    again, entry = execute_tick(finished, True, True)
    assert entry is None
    assert again is finished


def test_run_steps_interleaves_uneven_counts(long_race) -> None:
    race, entries = run_steps(long_race, 3, 1)

    assert len(entries) == 3
    assert [(e.did_left_step, e.did_right_step) for e in entries] == [
        (True, True), (True, False), (True, False),
    ]
    assert race.left.state.metrics.steps == 3
    assert race.right.state.metrics.steps == 1


def test_run_steps_with_zero_ticks_is_a_no_op(long_race) -> None:
    race, entries = run_steps(long_race, 0, 0)
    assert entries == []
    assert race is long_race


def test_run_steps_stops_once_both_lanes_finish(small_race) -> None:
    race, entries = run_steps(small_race, 100, 100)

    assert race.all_done
    assert len(entries) == 4
    assert entries[-1].did_left_step is True
    assert entries[-1].did_right_step is False
    assert race.left.finished_at_tick == 4
    assert race.right.finished_at_tick == 3
    assert is_sorted(race.left.state.array)
    assert is_sorted(race.right.state.array)


def test_winner_is_pending_before_anyone_finishes(small_race) -> None:
    verdict = winner(small_race)
    assert verdict.lane is None
    assert verdict.label == "Pending"


def test_winner_is_the_only_finished_lane(small_race) -> None:
    race, _ = run_steps(small_race, 0, 3)
    verdict = winner(race)
    assert verdict.lane == RIGHT
    assert verdict.label == "Bubble Sort (right)"


def test_winner_prefers_the_earlier_finish(small_race) -> None:
    race, _ = run_steps(small_race, 10, 10)
    assert winner(race).lane == RIGHT


def test_identical_lanes_tie() -> None:
    race = create_race([4, 3, 2, 1], seed=0, left="selection", right="selection")
    race, _ = run_steps(race, 50, 50)
    verdict = winner(race)
    assert verdict.lane is None
    assert verdict.label == "Tie"


def test_reset_race_keeps_the_dataset(small_race) -> None:
    race, _ = run_steps(small_race, 2, 2)
    fresh = reset_race(race, "merge", "insertion")

    assert fresh.initial_data == small_race.initial_data
    assert fresh.seed == small_race.seed
    assert fresh.lane(LEFT).algorithm == "merge"
    assert fresh.left.state.metrics.steps == 0


def test_is_sorted() -> None:
    assert is_sorted([])
    assert is_sorted([1, 1, 2])
    assert not is_sorted([2, 1])
