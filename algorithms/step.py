"""
step.py — Stepper State & Events
=================================
Every sorting algorithm is a resumable state machine.  One call to its
`step()` performs exactly ONE primitive operation and reports what
happened as a short, ordered list of StepEvents:

    • compare(i, j)         – two positions were compared
    • swap(i, j)            – two positions exchanged values
    • overwrite(i, value)   – position i was written (merge sort)
    • pivot(i)              – position i was selected as pivot
    • markSorted(i)         – position i holds its final value

Design decisions:
  - AlgoState is a SNAPSHOT.  A stepper never mutates the state it is
    handed; it copies the array and its internal cursor, edits the copies
    and returns a fresh AlgoState built by `apply_step`.
  - Metrics and highlight hints are derived from the events, so the five
    algorithms only have to worry about their own cursor.
  - `internal` is opaque outside the algorithm module that created it.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

Range = Tuple[int, int]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
COMPARE     = "compare"
SWAP        = "swap"
OVERWRITE   = "overwrite"
PIVOT       = "pivot"
MARK_SORTED = "markSorted"

EVENT_TYPES = (COMPARE, SWAP, OVERWRITE, PIVOT, MARK_SORTED)


@dataclass(frozen=True)
class StepEvent:
    """
    Attributes:
        type  : One of EVENT_TYPES.
        i     : Primary index.
        j     : Second index for compare / swap, else None.
        value : Written value for overwrite, else None.
    """

    type:   str
    i:      int
    j:      Optional[int] = None
    value:  Optional[int] = None

    # -- constructors --
    @classmethod
    def compare(cls, i: int, j: int) -> "StepEvent":
        return cls(COMPARE, i, j)

    @classmethod
    def swap(cls, i: int, j: int) -> "StepEvent":
        return cls(SWAP, i, j)

    @classmethod
    def overwrite(cls, i: int, value: int) -> "StepEvent":
        return cls(OVERWRITE, i, value=value)

    @classmethod
    def pivot(cls, i: int) -> "StepEvent":
        return cls(PIVOT, i)

    @classmethod
    def mark_sorted(cls, i: int) -> "StepEvent":
        return cls(MARK_SORTED, i)

    def label(self) -> str:
        """Narration string, e.g. `compare(3, 4)`."""
        if self.type in (COMPARE, SWAP):
            return f"{self.type}({self.i}, {self.j})"
        if self.type == OVERWRITE:
            return f"overwrite({self.i}, {self.value})"
        return f"{self.type}({self.i})"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "i": self.i}
        if self.j is not None:
            data["j"] = self.j
        if self.value is not None:
            data["value"] = self.value
        return data


def mark_all_sorted(length: int) -> List[StepEvent]:
    return [StepEvent.mark_sorted(i) for i in range(length)]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------
@dataclass
class AlgoMetrics:
    comparisons:    int = 0
    swaps:          int = 0
    overwrites:     int = 0
    steps:          int = 0
    elapsed_ticks:  int = 0

    def to_dict(self) -> Dict[str, int]:
        return dict(self.__dict__)


# ---------------------------------------------------------------------------
# AlgoState
# ---------------------------------------------------------------------------
@dataclass
class AlgoState:
    """
    Attributes:
        algorithm      : Registry key of the algorithm that owns this state.
        array          : Current values; length is fixed for the whole run.
        internal       : Algorithm-specific cursor (opaque outside the algorithm).
        done           : Terminal flag.
        metrics        : Running counters, never decrease.
        sorted         : Per-index "this position is final" flags.
        active_compare : Pair compared on the last step (hint).
        active_swap    : Pair swapped on the last step (hint).
        pivot_index    : Current pivot position (quick sort hint).
        merge_window   : [left, right] span being merged (merge sort hint).
        last_overwrite : Index written on the last step (hint).
    """

    algorithm:       str
    array:           List[int]
    internal:        Any
    done:            bool              = False
    metrics:         AlgoMetrics       = field(default_factory=AlgoMetrics)
    sorted:          List[bool]        = field(default_factory=list)
    active_compare:  Optional[Range]   = None
    active_swap:     Optional[Range]   = None
    pivot_index:     Optional[int]     = None
    merge_window:    Optional[Range]   = None
    last_overwrite:  Optional[int]     = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain read-only view for the presentation layer (no `internal`)."""
        return {
            "algorithm":      self.algorithm,
            "array":          list(self.array),
            "done":           self.done,
            "metrics":        self.metrics.to_dict(),
            "sorted":         list(self.sorted),
            "active_compare": list(self.active_compare) if self.active_compare else None,
            "active_swap":    list(self.active_swap) if self.active_swap else None,
            "pivot_index":    self.pivot_index,
            "merge_window":   list(self.merge_window) if self.merge_window else None,
            "last_overwrite": self.last_overwrite,
        }


@dataclass(frozen=True)
class StepResult:
    state:   AlgoState
    done:    bool
    events:  Tuple[StepEvent, ...] = ()


def create_base_state(algorithm: str, data: Sequence[int], internal: Any) -> AlgoState:
    """Fresh state: copied array, zero counters, `done` iff len <= 1."""
    done = len(data) <= 1
    return AlgoState(
        algorithm=algorithm,
        array=list(data),
        internal=internal,
        done=done,
        metrics=AlgoMetrics(),
        sorted=[done] * len(data),
    )


def finished(state: AlgoState) -> StepResult:
    """The no-op result for an already completed state."""
    return StepResult(
        state=AlgoState(
            algorithm=state.algorithm,
            array=list(state.array),
            internal=copy.deepcopy(state.internal),
            done=True,
            metrics=AlgoMetrics(**state.metrics.to_dict()),
            sorted=list(state.sorted),
            active_compare=state.active_compare,
            active_swap=state.active_swap,
            pivot_index=state.pivot_index,
            merge_window=state.merge_window,
            last_overwrite=state.last_overwrite,
        ),
        done=True,
    )


def apply_step(
    prev: AlgoState,
    array: List[int],
    internal: Any,
    events: List[StepEvent],
    done: bool = False,
    pivot_index: Optional[int] = None,
    merge_window: Optional[Range] = None,
) -> StepResult:
    """
    Build the next AlgoState from the algorithm's edited copies plus the
    events it emitted.  Counts one step and one elapsed tick.
    """
    sorted_flags = list(prev.sorted)
    active_compare: Optional[Range] = None
    active_swap:    Optional[Range] = None
    last_overwrite: Optional[int]   = None
    pivot_from_event: Optional[int] = None

    comparisons = prev.metrics.comparisons
    swaps       = prev.metrics.swaps
    overwrites  = prev.metrics.overwrites

    for event in events:
        if event.type == COMPARE:
            comparisons += 1
            active_compare = (event.i, event.j)
        elif event.type == SWAP:
            swaps += 1
            active_swap = (event.i, event.j)
        elif event.type == OVERWRITE:
            overwrites += 1
            last_overwrite = event.i
        elif event.type == PIVOT:
            pivot_from_event = event.i
        elif event.type == MARK_SORTED and 0 <= event.i < len(sorted_flags):
            sorted_flags[event.i] = True

    if done:
        sorted_flags = [True] * len(sorted_flags)

    state = AlgoState(
        algorithm=prev.algorithm,
        array=array,
        internal=internal,
        done=done,
        metrics=AlgoMetrics(
            comparisons=comparisons,
            swaps=swaps,
            overwrites=overwrites,
            steps=prev.metrics.steps + 1,
            elapsed_ticks=prev.metrics.elapsed_ticks + 1,
        ),
        sorted=sorted_flags,
        active_compare=active_compare,
        active_swap=active_swap,
        pivot_index=pivot_index if pivot_index is not None else pivot_from_event,
        merge_window=merge_window,
        last_overwrite=last_overwrite,
    )
    return StepResult(state=state, done=done, events=tuple(events))
