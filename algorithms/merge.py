"""
merge.py — Bottom-Up Merge Sort
================================
Iterative merge sort: windows of `width` are merged pairwise, then
`width` doubles.  No recursion, so the run can pause between any two
writes.

A MergeFrame is one active merge of a[left..mid] with a[mid+1..right].
Both halves are copied into buffers when the frame opens; each call then
does ONE of:

  • compare(left+i, mid+1+j) + overwrite(k, smaller)    – both halves live
  • overwrite(k, leftover)                               – draining a half

A finished frame is cleared on the next call, which moves straight on to
the next window (or doubles `width`) so that call still does real work.
"""

import copy
from dataclasses import dataclass, field
from typing import List, Optional

from algorithms.step import (
    AlgoState, StepEvent, StepResult,
    apply_step, create_base_state, finished, mark_all_sorted,
)


PSEUDOCODE: List[str] = [
    "def merge_sort(a):",                                     # 0
    "    width ← 1",                                          # 1
    "    while width < n:",                                   # 2
    "        for left in range(0, n, 2 * width):",            # 3
    "            mid ← min(left + width - 1, n - 1)",         # 4
    "            right ← min(left + 2 * width - 1, n - 1)",   # 5
    "            merge(a, left, mid, right)",                 # 6
    "        width ← width * 2",                              # 7
]


@dataclass
class MergeFrame:
    left:          int
    mid:           int
    right:         int
    left_buffer:   List[int] = field(default_factory=list)
    right_buffer:  List[int] = field(default_factory=list)
    i:             int = 0
    j:             int = 0
    k:             int = 0


@dataclass
class MergeCursor:
    width:       int                  = 1
    left_start:  int                  = 0
    frame:       Optional[MergeFrame] = None


def init(data: List[int]) -> AlgoState:
    return create_base_state("merge", data, MergeCursor())


def _open_frame(cur: MergeCursor, array: List[int]) -> Optional[MergeFrame]:
    """Claim the next window at the current width, or None if it is a single run."""
    n     = len(array)
    left  = cur.left_start
    mid   = min(left + cur.width - 1, n - 1)
    right = min(left + 2 * cur.width - 1, n - 1)
    cur.left_start += cur.width * 2

    if mid >= right:
        return None
    return MergeFrame(
        left=left,
        mid=mid,
        right=right,
        left_buffer=array[left:mid + 1],
        right_buffer=array[mid + 1:right + 1],
        k=left,
    )


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
        if cur.frame is None:
            if cur.width >= n:
                events.extend(mark_all_sorted(n))
                done = True
                break
            if cur.left_start >= n - 1:
                cur.width *= 2
                cur.left_start = 0
                continue
            cur.frame = _open_frame(cur, array)
            if cur.frame is None:
                continue

        frame = cur.frame
        left_live  = frame.i < len(frame.left_buffer)
        right_live = frame.j < len(frame.right_buffer)

        if left_live and right_live:
            events.append(StepEvent.compare(frame.left + frame.i, frame.mid + 1 + frame.j))
            # `<=` keeps the sort stable
            if frame.left_buffer[frame.i] <= frame.right_buffer[frame.j]:
                value = frame.left_buffer[frame.i]
                frame.i += 1
            else:
                value = frame.right_buffer[frame.j]
                frame.j += 1
        elif left_live:
            value = frame.left_buffer[frame.i]
            frame.i += 1
        elif right_live:
            value = frame.right_buffer[frame.j]
            frame.j += 1
        else:
            cur.frame = None
            continue

        array[frame.k] = value
        events.append(StepEvent.overwrite(frame.k, value))
        frame.k += 1

    window = (cur.frame.left, cur.frame.right) if cur.frame is not None else None
    return apply_step(state, array, cur, events, done=done, merge_window=window)
