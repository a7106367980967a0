"""
insertion.py — Insertion Sort
==============================
Grows a sorted prefix.  Each call either pulls the new element one slot
to the left (compare + swap) or, when the leftward walk stops, marks the
element sorted and moves on to the next one.

Cursor: (i = element being inserted, j = its current position).
"""

import copy
from dataclasses import dataclass
from typing import List

from algorithms.step import (
    AlgoState, StepEvent, StepResult,
    apply_step, create_base_state, finished, mark_all_sorted,
)


PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                          # 0
    "    for i in range(1, n):",                       # 1
    "        j ← i",                                   # 2
    "        while j > 0 and a[j - 1] > a[j]:",        # 3
    "            swap(a[j - 1], a[j])",                # 4
    "            j ← j - 1",                           # 5
]


@dataclass
class InsertionCursor:
    i: int = 1
    j: int = 1


def init(data: List[int]) -> AlgoState:
    return create_base_state("insertion", data, InsertionCursor())


def _next_element(cur: InsertionCursor, events: List[StepEvent]) -> None:
    events.append(StepEvent.mark_sorted(cur.i))
    cur.i += 1
    cur.j = cur.i


def step(state: AlgoState) -> StepResult:
    if state.done:
        return finished(state)

    array  = list(state.array)
    cur    = copy.copy(state.internal)
    events: List[StepEvent] = []
    n      = len(array)

    if n < 2 or cur.i >= n:
        events.extend(mark_all_sorted(n))
        return apply_step(state, array, cur, events, done=True)

    if cur.j > 0:
        left, right = cur.j - 1, cur.j
        events.append(StepEvent.compare(left, right))
        if array[left] > array[right]:
            array[left], array[right] = array[right], array[left]
            events.append(StepEvent.swap(left, right))
            cur.j -= 1
        else:
            _next_element(cur, events)
    else:
        # walked all the way to the front
        _next_element(cur, events)

    if cur.i >= n:
        events.extend(mark_all_sorted(n))
        return apply_step(state, array, cur, events, done=True)

    return apply_step(state, array, cur, events)
