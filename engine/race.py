"""
race.py — Runners & the Race
=============================
A Runner is one lane: a stepper plus its bookkeeping.  A Race is two
Runners that start from independent copies of the same dataset.

Everything here is value-in / value-out.  `step_runner` and
`execute_tick` never touch the objects they are given; they return new
Runner / Race values, so an older Race (a timeline checkpoint, the
previous frame on screen) stays valid forever.

Stepping policy (`run_steps`):
    for i in range(max(left_ticks, right_ticks)):
        step left  if i < left_ticks
        step right if i < right_ticks
        stop early once both lanes are done

Lockstep is simply left_ticks == right_ticks.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from algorithms import AlgoState, StepEvent, require_algorithm

LEFT  = "left"
RIGHT = "right"
LANES = (LEFT, RIGHT)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Runner:
    """
    Attributes:
        algorithm        : Registry key of the lane's algorithm.
        state            : Current AlgoState.
        finished_at_tick : Lane tick on which `done` flipped to True (set once).
    """

    algorithm:         str
    state:             AlgoState
    finished_at_tick:  Optional[int] = None

    @property
    def done(self) -> bool:
        return self.state.done


def create_runner(algorithm: str, data: Sequence[int]) -> Runner:
    info = require_algorithm(algorithm)
    return Runner(algorithm=algorithm, state=info.init(list(data)))


def step_runner(runner: Runner) -> Tuple[Runner, bool, Tuple[StepEvent, ...]]:
    """One algorithm step.  Returns (runner, did_step, events)."""
    if runner.state.done:
        return runner, False, ()

    result = require_algorithm(runner.algorithm).step(runner.state)
    finished_at = runner.finished_at_tick
    if result.done and finished_at is None:
        finished_at = result.state.metrics.elapsed_ticks

    return replace(runner, state=result.state, finished_at_tick=finished_at), True, result.events


# ---------------------------------------------------------------------------
# TimelineEntry — what one tick did
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TimelineEntry:
    did_left_step:   bool
    did_right_step:  bool
    left_events:     Tuple[StepEvent, ...] = ()
    right_events:    Tuple[StepEvent, ...] = ()

    def to_dict(self) -> dict:
        return {
            "did_left_step":  self.did_left_step,
            "did_right_step": self.did_right_step,
            "left_events":    [e.to_dict() for e in self.left_events],
            "right_events":   [e.to_dict() for e in self.right_events],
        }


# ---------------------------------------------------------------------------
# Race
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Race:
    seed:          int
    initial_data:  Tuple[int, ...]
    left:          Runner
    right:         Runner

    @property
    def all_done(self) -> bool:
        return self.left.done and self.right.done

    def lane(self, name: str) -> Runner:
        if name == LEFT:
            return self.left
        if name == RIGHT:
            return self.right
        raise ValueError(f"Unknown lane: {name}")


def create_race(data: Sequence[int], seed: int, left: str, right: str) -> Race:
    initial = tuple(data)
    return Race(
        seed=seed,
        initial_data=initial,
        left=create_runner(left, initial),
        right=create_runner(right, initial),
    )


def reset_race(race: Race, left: str, right: str) -> Race:
    return create_race(race.initial_data, race.seed, left, right)


def execute_tick(
    race: Race,
    want_left: bool,
    want_right: bool,
) -> Tuple[Race, Optional[TimelineEntry]]:
    """
    Step the requested lanes once (left first).  Returns entry=None when
    neither lane actually moved; such a tick must not be recorded.
    """
    left, right = race.left, race.right
    did_left = did_right = False
    left_events: Tuple[StepEvent, ...] = ()
    right_events: Tuple[StepEvent, ...] = ()

    if want_left:
        left, did_left, left_events = step_runner(left)
    if want_right:
        right, did_right, right_events = step_runner(right)

    if not did_left and not did_right:
        return race, None

    entry = TimelineEntry(
        did_left_step=did_left,
        did_right_step=did_right,
        left_events=left_events,
        right_events=right_events,
    )
    return replace(race, left=left, right=right), entry


def run_steps(race: Race, left_ticks: int, right_ticks: int) -> Tuple[Race, List[TimelineEntry]]:
    """Batched ticks for manual stepping and the animation scheduler."""
    entries: List[TimelineEntry] = []
    for i in range(max(left_ticks, right_ticks, 0)):
        race, entry = execute_tick(race, i < left_ticks, i < right_ticks)
        if entry is not None:
            entries.append(entry)
        if race.all_done:
            break
    return race, entries


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WinnerVerdict:
    lane:   Optional[str]      # "left" / "right" / None
    label:  str                # e.g. "Quick Sort (left)", "Pending", "Tie"


def winner(race: Race) -> WinnerVerdict:
    """
    Neither done → pending.  One done → that lane.  Both done → earlier
    finish tick, then fewer steps, else tie.
    """
    def verdict(lane: str) -> WinnerVerdict:
        label = require_algorithm(race.lane(lane).algorithm).label
        return WinnerVerdict(lane, f"{label} ({lane})")

    left, right = race.left, race.right
    if not left.done and not right.done:
        return WinnerVerdict(None, "Pending")
    if left.done != right.done:
        return verdict(LEFT if left.done else RIGHT)

    inf = float("inf")
    left_finish  = left.finished_at_tick if left.finished_at_tick is not None else inf
    right_finish = right.finished_at_tick if right.finished_at_tick is not None else inf
    if left_finish != right_finish:
        return verdict(LEFT if left_finish < right_finish else RIGHT)

    left_steps, right_steps = left.state.metrics.steps, right.state.metrics.steps
    if left_steps != right_steps:
        return verdict(LEFT if left_steps < right_steps else RIGHT)
    return WinnerVerdict(None, "Tie")


def is_sorted(values: Sequence[int]) -> bool:
    return all(values[k - 1] <= values[k] for k in range(1, len(values)))
