"""
session.py — Race Session
==========================
The Session is the ONLY object a host shell talks to.  It couples the
live Race with its Timeline and keeps one invariant:

    session.race == session.timeline.race_at(session.timeline.cursor_step)

Lifecycle:
    regenerate()      →  new dataset           →  new Session, new Timeline
    reset()           →  same dataset          →  new Session, new Timeline
    with_algorithm()  →  one lane swapped      →  new Session, new Timeline
    advance()         →  new ticks             →  truncate-if-scrubbed, append
    scrub() / step_back() / step_forward() / jump_to_latest()
                      →  pure navigation, no new computation

Restarts return a NEW Session value; the old one stays intact.  Advancing
and navigating update the session in place (single owner, single thread).
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Sequence

from algorithms import require_algorithm
from dataset import generate_dataset, normalize_seed, PATTERNS
from engine.race import (
    LANES, LEFT, Race, WinnerVerdict, create_race, is_sorted, reset_race, run_steps, winner,
)
from engine.timeline import CHECKPOINT_INTERVAL, HISTORY_CAP, Timeline

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_SIZE    = 60
DEFAULT_PATTERN = "random"
DEFAULT_LEFT    = "quick"
DEFAULT_RIGHT   = "merge"
MIN_SIZE        = 2
MAX_SIZE        = 300


@dataclass(frozen=True)
class RaceSettings:
    size:                 int = DEFAULT_SIZE
    pattern:              str = DEFAULT_PATTERN
    history_cap:          int = HISTORY_CAP
    checkpoint_interval:  int = CHECKPOINT_INTERVAL

    def validated(self) -> "RaceSettings":
        if self.pattern not in PATTERNS:
            raise ValueError(f"Unknown dataset pattern: {self.pattern}")
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise ValueError(f"Dataset size must be in [{MIN_SIZE}, {MAX_SIZE}], got {self.size}")
        return self


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------
class Session:
    """
    Attributes:
        race      : Race at timeline.cursor_step (what is on screen).
        timeline  : History of this race.
        settings  : Size / pattern / retention used to build it.
    """

    def __init__(self, race: Race, settings: Optional[RaceSettings] = None):
        self.settings: RaceSettings = settings or RaceSettings()
        self.timeline: Timeline     = Timeline(
            race,
            history_cap=self.settings.history_cap,
            checkpoint_interval=self.settings.checkpoint_interval,
        )
        self.race:     Race         = self.timeline.race_at(0)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        data: Sequence[int],
        seed: int,
        left: str = DEFAULT_LEFT,
        right: str = DEFAULT_RIGHT,
        settings: Optional[RaceSettings] = None,
    ) -> "Session":
        race = create_race(data, seed, left, right)
        LOGGER.info("new session: %s vs %s, %d values, seed %d", left, right, len(data), seed)
        return cls(race, settings)

    @classmethod
    def generate(
        cls,
        seed: Any = None,
        left: str = DEFAULT_LEFT,
        right: str = DEFAULT_RIGHT,
        settings: Optional[RaceSettings] = None,
    ) -> "Session":
        """Build a dataset from settings + seed, then a Session on it."""
        settings = (settings or RaceSettings()).validated()
        resolved = normalize_seed(seed)
        data = generate_dataset(settings.size, settings.pattern, resolved)
        return cls.create(data, resolved, left, right, settings)

    def regenerate(
        self,
        size: Optional[int] = None,
        pattern: Optional[str] = None,
        seed: Any = None,
    ) -> "Session":
        settings = replace(
            self.settings,
            size=self.settings.size if size is None else size,
            pattern=pattern or self.settings.pattern,
        )
        return Session.generate(seed, self.race.left.algorithm, self.race.right.algorithm, settings)

    def reset(self) -> "Session":
        race = reset_race(self.race, self.race.left.algorithm, self.race.right.algorithm)
        LOGGER.info("session reset (seed %d)", race.seed)
        return Session(race, self.settings)

    def with_algorithm(self, lane: str, algorithm: str) -> "Session":
        """Swap one lane's algorithm.  History restarts for BOTH lanes."""
        if lane not in LANES:
            raise ValueError(f"Unknown lane: {lane}")
        require_algorithm(algorithm)

        left, right = self.race.left.algorithm, self.race.right.algorithm
        if lane == LEFT:
            left = algorithm
        else:
            right = algorithm
        LOGGER.info("%s lane switched to %s", lane, algorithm)
        return Session(reset_race(self.race, left, right), self.settings)

    # ------------------------------------------------------------------
    # Advancing
    # ------------------------------------------------------------------
    def advance(self, left_ticks: int = 1, right_ticks: int = 1) -> int:
        """Run new ticks from the cursor.  Returns the number recorded."""
        race, entries = run_steps(self.race, left_ticks, right_ticks)
        if not entries:
            return 0

        self.timeline.truncate_future()
        self.race = self.timeline.append(self.race, entries)
        assert self.race == race, "replay divergence while recording"
        return len(entries)

    def step(self) -> int:
        return self.advance(1, 1)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def scrub(self, step: int) -> None:
        self.race = self.timeline.scrub(step)

    def step_back(self) -> None:
        self.scrub(self.timeline.cursor_step - 1)

    def step_forward(self) -> None:
        self.scrub(self.timeline.cursor_step + 1)

    def jump_to_latest(self) -> None:
        self.scrub(self.timeline.latest_step)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def all_done(self) -> bool:
        return self.race.all_done

    @property
    def winner(self) -> WinnerVerdict:
        return winner(self.race)

    @property
    def active_entry(self):
        return self.timeline.active_entry

    def snapshot(self) -> Dict[str, Any]:
        """Plain dict for the presentation layer."""
        lanes: Dict[str, Any] = {}
        for name in LANES:
            runner = self.race.lane(name)
            info = require_algorithm(runner.algorithm)
            lanes[name] = {
                "algorithm":        runner.algorithm,
                "label":            info.label,
                "big_o":            info.big_o,
                "finished_at_tick": runner.finished_at_tick,
                "is_sorted":        is_sorted(runner.state.array),
                "state":            runner.state.to_dict(),
            }

        entry = self.active_entry
        verdict = self.winner
        return {
            "seed":         self.race.seed,
            "size":         len(self.race.initial_data),
            "pattern":      self.settings.pattern,
            "lanes":        lanes,
            "all_done":     self.all_done,
            "winner":       {"lane": verdict.lane, "label": verdict.label},
            "timeline":     self.timeline.bounds(),
            "active_entry": entry.to_dict() if entry is not None else None,
        }
