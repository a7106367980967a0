"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every sorting algorithm a lane can run.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, init, step, pseudocode, big_o, …),
        …
    }

Each algorithm module exposes `init(data) -> AlgoState` and
`step(state) -> StepResult`; the engine only ever talks to them through
the AlgoInfo card.  The set is closed: five strategies, no plug-ins.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from algorithms import bubble, insertion, merge, quick, selection
from algorithms.step import AlgoMetrics, AlgoState, StepEvent, StepResult


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AlgoInfo:
    key:          str                                   # registry key, e.g. "quick"
    label:        str                                   # human label, e.g. "Quick Sort"
    init:         Callable[[List[int]], AlgoState]
    step:         Callable[[AlgoState], StepResult]
    pseudocode:   List[str] = field(default_factory=list)
    big_o:        str       = ""                        # e.g. "O(n log n)"
    description:  str       = ""                        # one-liner for the race notes


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", init=bubble.init, step=bubble.step,
        pseudocode=bubble.PSEUDOCODE, big_o="O(n²)",
        description="Repeatedly compares adjacent values and swaps them, "
                    "bubbling larger values rightward each pass.",
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", init=insertion.init, step=insertion.step,
        pseudocode=insertion.PSEUDOCODE, big_o="O(n²)",
        description="Builds a sorted prefix by inserting each new value into "
                    "its correct location with adjacent swaps.",
    ),

    "selection": AlgoInfo(
        key="selection", label="Selection Sort", init=selection.init, step=selection.step,
        pseudocode=selection.PSEUDOCODE, big_o="O(n²)",
        description="Finds the smallest remaining value and places it at the "
                    "front of the unsorted region.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", init=merge.init, step=merge.step,
        pseudocode=merge.PSEUDOCODE, big_o="O(n log n)",
        description="Bottom-up merge sort that repeatedly merges sorted windows "
                    "using overwrite operations.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", init=quick.init, step=quick.step,
        pseudocode=quick.PSEUDOCODE, big_o="O(n log n) avg",
        description="Iterative Lomuto partition quicksort with explicit pivot, "
                    "compare, and swap events.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def require_algorithm(key: str) -> AlgoInfo:
    """Like get_algorithm, but an unknown key is a caller error."""
    info = REGISTRY.get(key)
    if info is None:
        raise ValueError(f"Unknown algorithm: {key}")
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "AlgoMetrics",
    "AlgoState",
    "REGISTRY",
    "StepEvent",
    "StepResult",
    "get_algorithm",
    "list_algorithms",
    "require_algorithm",
]
