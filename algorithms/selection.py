"""
selection.py — Selection Sort
==============================
Scans the unsorted suffix one comparison per call, tracking the index of
the smallest value.  When the scan runs off the end the minimum is
swapped into slot `i` (if it is not already there) and marked sorted.

Cursor: (i = next slot to fill, j = scan position, min_index).
"""

import copy
from dataclasses import dataclass
from typing import List

from algorithms.step import (
    AlgoState, StepEvent, StepResult,
    apply_step, create_base_state, finished, mark_all_sorted,
)


PSEUDOCODE: List[str] = [
    "def selection_sort(a):",                   # 0
    "    for i in range(n - 1):",               # 1
    "        m ← i",                            # 2
    "        for j in range(i + 1, n):",        # 3
    "            if a[j] < a[m]: m ← j",        # 4
    "        if m != i: swap(a[i], a[m])",      # 5
]


@dataclass
class SelectionCursor:
    i:          int = 0
    j:          int = 1
    min_index:  int = 0


def init(data: List[int]) -> AlgoState:
    return create_base_state("selection", data, SelectionCursor())


def step(state: AlgoState) -> StepResult:
    if state.done:
        return finished(state)

    array  = list(state.array)
    cur    = copy.copy(state.internal)
    events: List[StepEvent] = []
    n      = len(array)

    if n < 2 or cur.i >= n - 1:
        events.extend(mark_all_sorted(n))
        return apply_step(state, array, cur, events, done=True)

    # -- scan --
    if cur.j < n:
        events.append(StepEvent.compare(cur.min_index, cur.j))
        if array[cur.j] < array[cur.min_index]:
            cur.min_index = cur.j
        cur.j += 1
        return apply_step(state, array, cur, events)

    # -- place the minimum --
    if cur.min_index != cur.i:
        array[cur.i], array[cur.min_index] = array[cur.min_index], array[cur.i]
        events.append(StepEvent.swap(cur.i, cur.min_index))
    events.append(StepEvent.mark_sorted(cur.i))

    cur.i += 1
    cur.min_index = cur.i
    cur.j = cur.i + 1

    if cur.i >= n - 1:
        events.extend(mark_all_sorted(n))
        return apply_step(state, array, cur, events, done=True)

    return apply_step(state, array, cur, events)
