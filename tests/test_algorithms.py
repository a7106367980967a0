from __future__ import annotations

import pytest

from algorithms import REGISTRY, StepEvent, list_algorithms, require_algorithm
from algorithms.step import COMPARE, MARK_SORTED, OVERWRITE, SWAP
from dataset import PATTERNS, generate_dataset

ALGORITHMS = [info.key for info in list_algorithms()]


def test_registry_has_the_five_strategies() -> None:
    assert ALGORITHMS == ["bubble", "insertion", "selection", "merge", "quick"]
    for info in REGISTRY.values():
        assert info.label and info.big_o and info.description and info.pseudocode


def test_unknown_algorithm_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown algorithm"):
        require_algorithm("bogo")


@pytest.mark.parametrize("key", ALGORITHMS)
def test_init_copies_input_and_zeroes_counters(key: str) -> None:
    data = [4, 2, 9, 1]
    state = require_algorithm(key).init(data)
    data[0] = 100

    assert state.array == [4, 2, 9, 1]
    assert state.done is False
    assert state.sorted == [False] * 4
    assert state.metrics.to_dict() == {
        "comparisons": 0, "swaps": 0, "overwrites": 0, "steps": 0, "elapsed_ticks": 0,
    }


@pytest.mark.parametrize("key", ALGORITHMS)
@pytest.mark.parametrize("data", [[], [7]])
def test_trivial_inputs_start_done(key: str, data: list[int]) -> None:
    state = require_algorithm(key).init(data)
    assert state.done is True
    assert state.sorted == [True] * len(data)
    assert state.metrics.steps == 0


def test_quick_on_single_element_is_done_immediately() -> None:
    state = require_algorithm("quick").init([1])
    assert state.done is True
    assert state.metrics.steps == 0
    assert state.sorted == [True]


@pytest.mark.parametrize("key", ALGORITHMS)
@pytest.mark.parametrize("pattern", list(PATTERNS))
def test_every_algorithm_sorts_every_pattern(run_to_end, key: str, pattern: str) -> None:
    for seed in (1, 7, 2024):
        data = generate_dataset(25, pattern, seed)
        state, trace = run_to_end(key, data)

        assert state.array == sorted(data)
        assert all(state.sorted)
        assert state.metrics.steps == len(trace)
        assert state.metrics.elapsed_ticks == len(trace)


@pytest.mark.parametrize("key", ALGORITHMS)
def test_runs_are_deterministic(run_to_end, key: str) -> None:
    data = generate_dataset(30, "random", 99)
    first_state, first_trace = run_to_end(key, data)
    second_state, second_trace = run_to_end(key, data)

    assert first_trace == second_trace
    assert first_state == second_state


@pytest.mark.parametrize("key", ALGORITHMS)
def test_every_step_emits_events(run_to_end, key: str) -> None:
    _, trace = run_to_end(key, generate_dataset(20, "few-unique", 3))
    assert all(events for events in trace)


@pytest.mark.parametrize("key", ALGORITHMS)
def test_completion_is_announced_with_full_mark_sorted(run_to_end, key: str) -> None:
    data = [5, 1, 4, 2, 3]
    _, trace = run_to_end(key, data)
    final_marks = {e.i for e in trace[-1] if e.type == MARK_SORTED}
    assert final_marks == set(range(len(data)))


@pytest.mark.parametrize("key", ALGORITHMS)
def test_counters_match_emitted_events(run_to_end, key: str) -> None:
    state, trace = run_to_end(key, generate_dataset(18, "random", 5))
    events = [e for step in trace for e in step]

    assert state.metrics.comparisons == sum(e.type == COMPARE for e in events)
    assert state.metrics.swaps == sum(e.type == SWAP for e in events)
    assert state.metrics.overwrites == sum(e.type == OVERWRITE for e in events)


@pytest.mark.parametrize("key", ALGORITHMS)
def test_stepping_a_done_state_is_a_no_op(run_to_end, key: str) -> None:
    state, _ = run_to_end(key, [3, 1, 2])
    info = require_algorithm(key)

    result = info.step(state)

    assert result.done is True
    assert result.events == ()
    assert result.state == state
    assert result.state.metrics.steps == state.metrics.steps
    assert result.state.internal is not state.internal


@pytest.mark.parametrize("key", ALGORITHMS)
def test_step_does_not_mutate_its_input(key: str) -> None:
    info = require_algorithm(key)
    state = info.init([4, 3, 2, 1])
    for _ in range(3):
        before_array = list(state.array)
        before_sorted = list(state.sorted)
        result = info.step(state)
        assert state.array == before_array
        assert state.sorted == before_sorted
        state = result.state


# ---------------------------------------------------------------------------
# Per-algorithm traces
# ---------------------------------------------------------------------------
def test_bubble_scenario() -> None:
    info = require_algorithm("bubble")
    state = info.init([5, 3, 4, 1, 2])

    first = info.step(state)
    assert first.events == (StepEvent.compare(0, 1), StepEvent.swap(0, 1))
    assert first.state.array == [3, 5, 4, 1, 2]
    assert first.state.active_compare == (0, 1)
    assert first.state.active_swap == (0, 1)

    state = first.state
    for _ in range(9):
        assert not state.done
        state = info.step(state).state

    assert state.done is True
    assert state.array == [1, 2, 3, 4, 5]
    assert state.sorted == [True] * 5
    assert state.metrics.steps == 10


def test_bubble_exits_early_on_sorted_input(run_to_end) -> None:
    state, trace = run_to_end("bubble", [1, 2, 3, 4])
    assert len(trace) == 3
    assert state.metrics.swaps == 0


def test_insertion_trace() -> None:
    info = require_algorithm("insertion")
    first = info.step(info.init([2, 1]))
    assert first.events == (StepEvent.compare(0, 1), StepEvent.swap(0, 1))
    assert first.state.array == [1, 2]

    second = info.step(first.state)
    assert second.done is True
    assert second.events[0] == StepEvent.mark_sorted(1)


def test_selection_trace(run_to_end) -> None:
    state, trace = run_to_end("selection", [3, 1, 2])

    assert trace[0] == (StepEvent.compare(0, 1),)
    assert trace[1] == (StepEvent.compare(1, 2),)
    assert trace[2] == (StepEvent.swap(0, 1), StepEvent.mark_sorted(0))
    assert len(trace) == 5
    assert state.array == [1, 2, 3]


def test_merge_trace_exposes_window() -> None:
    info = require_algorithm("merge")
    first = info.step(info.init([2, 1]))

    assert first.events == (StepEvent.compare(0, 1), StepEvent.overwrite(0, 1))
    assert first.state.merge_window == (0, 1)
    assert first.state.last_overwrite == 0

    second = info.step(first.state)
    assert second.events == (StepEvent.overwrite(1, 2),)
    assert second.state.array == [1, 2]

    third = info.step(second.state)
    assert third.done is True
    assert third.state.merge_window is None
    assert third.state.metrics.comparisons == 1
    assert third.state.metrics.overwrites == 2


def test_merge_handles_odd_lengths(run_to_end) -> None:
    state, _ = run_to_end("merge", [9, 8, 7, 6, 5, 4, 3])
    assert state.array == [3, 4, 5, 6, 7, 8, 9]


def test_quick_trace() -> None:
    info = require_algorithm("quick")
    state = info.init([3, 1, 2])

    first = info.step(state)
    assert first.events == (StepEvent.pivot(2),)
    assert first.state.pivot_index == 2

    second = info.step(first.state)
    assert second.events == (StepEvent.compare(0, 2),)

    third = info.step(second.state)
    assert third.events == (StepEvent.compare(1, 2), StepEvent.swap(0, 1))
    assert third.state.array == [1, 3, 2]

    fourth = info.step(third.state)
    assert fourth.done is True
    assert fourth.events[:4] == (
        StepEvent.swap(1, 2),
        StepEvent.mark_sorted(1),
        StepEvent.mark_sorted(2),
        StepEvent.mark_sorted(0),
    )
    assert fourth.state.array == [1, 2, 3]
    assert fourth.state.pivot_index is None


def test_event_labels() -> None:
    assert StepEvent.compare(1, 2).label() == "compare(1, 2)"
    assert StepEvent.swap(0, 3).label() == "swap(0, 3)"
    assert StepEvent.overwrite(4, 17).label() == "overwrite(4, 17)"
    assert StepEvent.pivot(5).label() == "pivot(5)"
    assert StepEvent.mark_sorted(6).label() == "markSorted(6)"
