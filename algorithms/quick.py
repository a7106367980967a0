"""
quick.py — Quick Sort (iterative Lomuto)
=========================================
The recursion is replaced by an explicit stack of pending segments.

Per call:
  1. no partition open  →  pop a segment, choose a[high] as pivot,
                           emit pivot(high)
  2. partition open     →  compare(j, pivot) and swap a[i], a[j] when
                           a[j] <= pivot
  3. scan finished      →  swap pivot into slot i, markSorted(i),
                           push sub-segments of length >= 2,
                           markSorted single-element ones right away

Finishes when the stack is empty.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional

from algorithms.step import (
    AlgoState, StepEvent, StepResult,
    apply_step, create_base_state, finished, mark_all_sorted,
)


PSEUDOCODE: List[str] = [
    "def quick_sort(a):",                              # 0
    "    stack ← [(0, n - 1)]",                        # 1
    "    while stack:",                                # 2
    "        low, high ← stack.pop()",                 # 3
    "        pivot ← a[high]; i ← low",                # 4
    "        for j in range(low, high):",              # 5
    "            if a[j] <= pivot:",                   # 6
    "                swap(a[i], a[j]); i ← i + 1",     # 7
    "        swap(a[i], a[high])",                     # 8
    "        push (i + 1, high), (low, i - 1)",        # 9
]


@dataclass(frozen=True)
class Segment:
    low:  int
    high: int


@dataclass
class PartitionFrame:
    low:          int
    high:         int
    pivot_index:  int
    pivot_value:  int
    i:            int
    j:            int


@dataclass
class QuickCursor:
    stack:  List[Segment]            = field(default_factory=list)
    frame:  Optional[PartitionFrame] = None


def init(data: List[int]) -> AlgoState:
    stack = [Segment(0, len(data) - 1)] if len(data) > 1 else []
    return create_base_state("quick", data, QuickCursor(stack=stack))


def _settle(segment: Segment, cur: QuickCursor, events: List[StepEvent]) -> None:
    """Queue a segment that still needs partitioning; a lone element is already final."""
    if segment.low < segment.high:
        cur.stack.append(segment)
    elif segment.low == segment.high:
        events.append(StepEvent.mark_sorted(segment.low))


def step(state: AlgoState) -> StepResult:
    if state.done:
        return finished(state)

    array  = list(state.array)
    cur    = copy.deepcopy(state.internal)
    events: List[StepEvent] = []
    n      = len(array)
    done   = False

    if n < 2:
        events.extend(mark_all_sorted(n))
        return apply_step(state, array, cur, events, done=True)

    while not events:
        # -- pick the next segment --
        if cur.frame is None:
            if not cur.stack:
                events.extend(mark_all_sorted(n))
                done = True
                break

            segment = cur.stack.pop()
            if segment.low >= segment.high:
                if segment.low == segment.high:
                    events.append(StepEvent.mark_sorted(segment.low))
                continue

            cur.frame = PartitionFrame(
                low=segment.low,
                high=segment.high,
                pivot_index=segment.high,
                pivot_value=array[segment.high],
                i=segment.low,
                j=segment.low,
            )
            events.append(StepEvent.pivot(segment.high))
            break

        frame = cur.frame

        # -- partition scan --
        if frame.j < frame.high:
            events.append(StepEvent.compare(frame.j, frame.pivot_index))
            if array[frame.j] <= frame.pivot_value:
                if frame.i != frame.j:
                    array[frame.i], array[frame.j] = array[frame.j], array[frame.i]
                    events.append(StepEvent.swap(frame.i, frame.j))
                frame.i += 1
            frame.j += 1
            break

        # -- place the pivot --
        if frame.i != frame.pivot_index:
            array[frame.i], array[frame.pivot_index] = array[frame.pivot_index], array[frame.i]
            events.append(StepEvent.swap(frame.i, frame.pivot_index))
        events.append(StepEvent.mark_sorted(frame.i))

        _settle(Segment(frame.i + 1, frame.high), cur, events)
        _settle(Segment(frame.low, frame.i - 1), cur, events)
        cur.frame = None

        if not cur.stack:
            events.extend(mark_all_sorted(n))
            done = True
        break

    pivot = cur.frame.pivot_index if cur.frame is not None else None
    return apply_step(state, array, cur, events, done=done, pivot_index=pivot)
