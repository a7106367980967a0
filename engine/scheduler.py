"""
scheduler.py — Animation Frame Scheduler
=========================================
The Session itself has no clock.  The host shell owns a FrameScheduler,
calls `tick(session)` once per animation frame / poll, and the scheduler
turns elapsed wall time into `session.advance(left_ticks, right_ticks)`.

State machine:
    PAUSED   →  play()             →  PLAYING
    PLAYING  →  pause()            →  PAUSED
    PLAYING  →  (both lanes done)  →  FINISHED
    FINISHED →  play() on an unfinished cursor race  →  PLAYING
    any      →  reset()            →  PAUSED

Pacing:
  - interval = 1000 / speed  ms per tick (speed in ticks per second).
  - lockstep ON   → one shared accumulator, both lanes get the same count.
  - lockstep OFF  → one accumulator per lane, counts may differ.
  - A frame never asks for more than MAX_TICKS_PER_FRAME ticks per lane.
    If more were due (tab was asleep, GC pause…) the accumulator is
    dropped instead of catching up.

Thread safety:
  Not thread-safe.  Call from the thread that owns the Session.
"""

import time
from enum import Enum
from typing import Optional, Tuple

from engine.session import Session


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class SchedulerState(Enum):
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (ticks per second)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   4,      # teaching mode
    "medium": 24,
    "fast":   90,
    "turbo":  400,
}

DEFAULT_SPEED       = SPEED_PRESETS["medium"]
MIN_SPEED           = 1
MAX_SPEED           = 1000
MAX_TICKS_PER_FRAME = 24


def _drain(accumulator: float, interval: float) -> Tuple[int, float]:
    """(ticks due, new accumulator) with the per-frame cap applied."""
    due = int(accumulator // interval)
    if due > MAX_TICKS_PER_FRAME:
        return MAX_TICKS_PER_FRAME, 0.0
    return due, accumulator - due * interval


# ---------------------------------------------------------------------------
# FrameScheduler
# ---------------------------------------------------------------------------
class FrameScheduler:
    """
    Attributes:
        state     : Current SchedulerState.
        speed     : Ticks per second.
        lockstep  : Both lanes share one accumulator when True.
    """

    def __init__(self, speed: float = DEFAULT_SPEED, lockstep: bool = True):
        self.state:     SchedulerState = SchedulerState.PAUSED
        self.speed:     float          = DEFAULT_SPEED
        self.lockstep:  bool           = lockstep
        self.set_speed_value(speed)

        self._last_tick:   Optional[float] = None
        self._shared_acc:  float = 0.0
        self._left_acc:    float = 0.0
        self._right_acc:   float = 0.0

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self, session: Optional[Session] = None) -> None:
        """
        Start pacing.  Leaves FINISHED whenever `session` (the cursor race)
        still has work, e.g. after scrubbing back into history.
        """
        if session is not None and session.all_done:
            self.state = SchedulerState.FINISHED
            return
        self.state = SchedulerState.PLAYING
        self._clear_clock()

    def pause(self) -> None:
        if self.state == SchedulerState.PLAYING:
            self.state = SchedulerState.PAUSED
        self._clear_clock()

    def toggle_play(self, session: Optional[Session] = None) -> None:
        if self.state == SchedulerState.PLAYING:
            self.pause()
        else:
            self.play(session)

    def reset(self) -> None:
        """A new Session was installed; wait for the next play()."""
        self.state = SchedulerState.PAUSED
        self._clear_clock()

    # ------------------------------------------------------------------
    # Speed / mode
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            raise ValueError(f"Unknown speed preset: {preset}")
        self.speed = SPEED_PRESETS[preset]

    def set_speed_value(self, ticks_per_second: float) -> None:
        self.speed = max(MIN_SPEED, min(float(ticks_per_second), MAX_SPEED))

    def set_lockstep(self, lockstep: bool) -> None:
        self.lockstep = lockstep
        self._shared_acc = self._left_acc = self._right_acc = 0.0

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.speed

    @property
    def is_playing(self) -> bool:
        return self.state == SchedulerState.PLAYING

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / frame callback)
    # ------------------------------------------------------------------
    def due_ticks(self, delta_ms: float) -> Tuple[int, int]:
        """Feed elapsed time, get (left_ticks, right_ticks) owed right now."""
        interval = self.interval_ms
        if self.lockstep:
            self._shared_acc += delta_ms
            ticks, self._shared_acc = _drain(self._shared_acc, interval)
            return ticks, ticks

        self._left_acc += delta_ms
        self._right_acc += delta_ms
        left, self._left_acc = _drain(self._left_acc, interval)
        right, self._right_acc = _drain(self._right_acc, interval)
        return left, right

    def tick(self, session: Session, now: Optional[float] = None) -> int:
        """
        If playing, advance `session` by whatever ticks are due since the
        previous call.  The first call after play() only starts the clock.
        Returns the number of ticks recorded.
        """
        if self.state != SchedulerState.PLAYING:
            return 0
        if session.all_done:
            self.state = SchedulerState.FINISHED
            return 0

        now = time.monotonic() if now is None else now
        if self._last_tick is None:
            self._last_tick = now
            return 0

        delta_ms = (now - self._last_tick) * 1000.0
        self._last_tick = now

        left, right = self.due_ticks(delta_ms)
        if left <= 0 and right <= 0:
            return 0

        recorded = session.advance(left, right)
        if session.all_done:
            self.state = SchedulerState.FINISHED
        return recorded

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _clear_clock(self) -> None:
        self._last_tick = None
        self._shared_acc = self._left_acc = self._right_acc = 0.0
