"""
bubble.py — Bubble Sort
========================
Step-resumable bubble sort.  Every call compares one adjacent pair and
swaps it when out of order:

  1. compare(j, j+1)  [+ swap(j, j+1)]
  2. end of pass      →  markSorted(n-i-1), next pass
  3. pass w/o swaps   →  early exit, everything is sorted

Cursor: (i = finished passes, j = left index of the pair, pass_swapped).
"""

import copy
from dataclasses import dataclass
from typing import List

from algorithms.step import (
    AlgoState, StepEvent, StepResult,
    apply_step, create_base_state, finished, mark_all_sorted,
)


PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                                   # 0
    "    for i in range(n - 1):",                            # 1
    "        swapped ← False",                               # 2
    "        for j in range(n - i - 1):",                    # 3
    "            if a[j] > a[j + 1]:",                       # 4
    "                swap(a[j], a[j + 1]); swapped ← True",  # 5
    "        if not swapped: break",                         # 6
]


@dataclass
class BubbleCursor:
    i:             int  = 0
    j:             int  = 0
    pass_swapped:  bool = False


def init(data: List[int]) -> AlgoState:
    return create_base_state("bubble", data, BubbleCursor())


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

    j = cur.j
    events.append(StepEvent.compare(j, j + 1))
    if array[j] > array[j + 1]:
        array[j], array[j + 1] = array[j + 1], array[j]
        events.append(StepEvent.swap(j, j + 1))
        cur.pass_swapped = True

    cur.j += 1

    # -- end of pass --
    if cur.j >= n - cur.i - 1:
        if not cur.pass_swapped:
            events.extend(mark_all_sorted(n))
            return apply_step(state, array, cur, events, done=True)

        events.append(StepEvent.mark_sorted(n - cur.i - 1))
        cur.i += 1
        cur.j = 0
        cur.pass_swapped = False

        if cur.i >= n - 1:
            events.extend(mark_all_sorted(n))
            return apply_step(state, array, cur, events, done=True)

    return apply_step(state, array, cur, events)
