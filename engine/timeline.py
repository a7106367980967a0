"""
timeline.py — Checkpointed Race History
========================================
Records every tick of a Race so the UI can scrub back and forth without
keeping every intermediate array around.

Layout:

    base_step                 cursor_step             latest_step
        │                          │                       │
        ▼                          ▼                       ▼
    base_race ── entries[0] ── … ── entries[k] ── … ── entries[-1]
        ▲               ▲                 ▲
    checkpoint     checkpoint        checkpoint      (every CHECKPOINT_INTERVAL ticks)

  - `entries[k]` is the tick that produced step `base_step + k + 1`.
  - Entries are the source of truth.  Checkpoints are full Race copies
    that only shorten replay; one always sits exactly at `base_step`.
  - Replay uses the did_left/did_right flags RECORDED in the entry, never
    recomputed ones, and checks the replayed events against the recorded
    ones.  Any mismatch means a stepper is not deterministic.

State machine:
    cursor == latest  →  LIVE        (append extends it)
    cursor <  latest  →  HISTORICAL  (read-only; appending first truncates
                                      everything after the cursor)

Retention:
    Once latest - base exceeds `history_cap`, the oldest ticks are folded
    into a new base_race and dropped.  Steps below the new base are gone.
"""

import bisect
import copy
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from engine.race import Race, TimelineEntry, execute_tick

LOGGER = logging.getLogger(__name__)

CHECKPOINT_INTERVAL = 20
HISTORY_CAP         = 5000


@dataclass(frozen=True)
class TimelineCheckpoint:
    step:  int
    race:  Race


def snapshot_race(race: Race) -> Race:
    """Fully independent copy; checkpoints never share buffers with a live Race."""
    return copy.deepcopy(race)


def replay_entry(race: Race, entry: TimelineEntry) -> Race:
    """Re-execute one recorded tick and insist it does exactly what it did before."""
    replayed, produced = execute_tick(race, entry.did_left_step, entry.did_right_step)
    assert produced == entry, (
        f"replay divergence: recorded {entry!r}, replay produced {produced!r}"
    )
    return replayed


class Timeline:
    """
    Attributes:
        base_step           : Oldest retained step (inclusive).
        latest_step         : Newest recorded step.
        cursor_step         : Step currently on screen.
        base_race           : Race at base_step.
        entries             : Ticks covering (base_step, latest_step].
        checkpoints         : Sorted by step; first one is always base_step.
        history_cap         : Max latest_step - base_step.
        checkpoint_interval : Cadence of full snapshots.
    """

    def __init__(
        self,
        race: Race,
        history_cap: int = HISTORY_CAP,
        checkpoint_interval: int = CHECKPOINT_INTERVAL,
    ):
        if history_cap < 1:
            raise ValueError(f"history_cap must be >= 1, got {history_cap}")
        if checkpoint_interval < 1:
            raise ValueError(f"checkpoint_interval must be >= 1, got {checkpoint_interval}")

        self.base_step:            int  = 0
        self.latest_step:          int  = 0
        self.cursor_step:          int  = 0
        self.base_race:            Race = snapshot_race(race)
        self.entries:              List[TimelineEntry]      = []
        self.checkpoints:          List[TimelineCheckpoint] = [TimelineCheckpoint(0, self.base_race)]
        self.history_cap:          int  = history_cap
        self.checkpoint_interval:  int  = checkpoint_interval

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def append(self, start_race: Race, entries: Iterable[TimelineEntry]) -> Race:
        """
        Record ticks already executed from `start_race` (the Race at
        latest_step).  Jumps the cursor to the new present and returns the
        Race there.
        """
        entries = list(entries)
        if not entries:
            return start_race

        race = start_race
        for entry in entries:
            race = replay_entry(race, entry)
            self.entries.append(entry)
            self.latest_step += 1
            if self.latest_step % self.checkpoint_interval == 0:
                self.checkpoints.append(TimelineCheckpoint(self.latest_step, snapshot_race(race)))
                LOGGER.debug("checkpoint at step %d", self.latest_step)

        self.cursor_step = self.latest_step
        self.trim()
        return race

    def truncate_future(self) -> int:
        """Drop everything after the cursor (branch-on-edit).  Returns ticks dropped."""
        if self.cursor_step >= self.latest_step:
            return 0

        dropped = self.latest_step - self.cursor_step
        del self.entries[self.cursor_step - self.base_step:]
        self.checkpoints = [c for c in self.checkpoints if c.step <= self.cursor_step]
        self.latest_step = self.cursor_step
        LOGGER.debug("truncated %d future tick(s) after step %d", dropped, self.cursor_step)
        return dropped

    def trim(self) -> None:
        """Evict the oldest history once it exceeds `history_cap`."""
        if self.latest_step - self.base_step <= self.history_cap:
            return

        new_base = self.latest_step - self.history_cap
        new_base_race = snapshot_race(self.race_at(new_base))

        del self.entries[:new_base - self.base_step]
        kept = [c for c in self.checkpoints if c.step > new_base]
        self.checkpoints = [TimelineCheckpoint(new_base, new_base_race)] + kept
        self.base_step = new_base
        self.base_race = new_base_race
        self.cursor_step = max(self.cursor_step, new_base)
        LOGGER.debug("trimmed history, base step now %d", new_base)

    def drop_checkpoints(self) -> None:
        """Keep only the base checkpoint.  Answers stay the same, only slower."""
        self.checkpoints = [TimelineCheckpoint(self.base_step, self.base_race)]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def clamp(self, step: int) -> int:
        return max(self.base_step, min(step, self.latest_step))

    def race_at(self, target: int) -> Race:
        """Race at `target` (clamped), replayed from the nearest checkpoint."""
        target = self.clamp(target)

        steps = [c.step for c in self.checkpoints]
        checkpoint = self.checkpoints[bisect.bisect_right(steps, target) - 1]

        race = snapshot_race(checkpoint.race)
        for step in range(checkpoint.step, target):
            race = replay_entry(race, self.entries[step - self.base_step])
        return race

    def entry_at(self, step: int) -> Optional[TimelineEntry]:
        """The tick that produced `step`; None at (or outside) the base."""
        if step <= self.base_step or step > self.latest_step:
            return None
        return self.entries[step - self.base_step - 1]

    @property
    def active_entry(self) -> Optional[TimelineEntry]:
        return self.entry_at(self.cursor_step)

    @property
    def is_live(self) -> bool:
        return self.cursor_step == self.latest_step

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def scrub(self, target: int) -> Race:
        """Move the cursor (clamped) and return the Race there."""
        self.cursor_step = self.clamp(target)
        return self.race_at(self.cursor_step)

    def bounds(self) -> dict:
        return {
            "base_step":   self.base_step,
            "latest_step": self.latest_step,
            "cursor_step": self.cursor_step,
            "history_cap": self.history_cap,
            "is_live":     self.is_live,
        }
