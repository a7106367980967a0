"""
engine/
-------
Race orchestration, history & playback layer.

    from engine import Session, Timeline, FrameScheduler
"""

from engine.race      import (
    LANES, LEFT, RIGHT, Race, Runner, TimelineEntry, WinnerVerdict,
    create_race, create_runner, execute_tick, is_sorted, reset_race,
    run_steps, step_runner, winner,
)
from engine.timeline  import CHECKPOINT_INTERVAL, HISTORY_CAP, Timeline, TimelineCheckpoint
from engine.session   import RaceSettings, Session
from engine.scheduler import FrameScheduler, SchedulerState, SPEED_PRESETS, MAX_TICKS_PER_FRAME

__all__ = [
    "LANES", "LEFT", "RIGHT",
    "Race", "Runner", "TimelineEntry", "WinnerVerdict",
    "create_race", "create_runner", "execute_tick", "is_sorted",
    "reset_race", "run_steps", "step_runner", "winner",
    "CHECKPOINT_INTERVAL", "HISTORY_CAP", "Timeline", "TimelineCheckpoint",
    "RaceSettings", "Session",
    "FrameScheduler", "SchedulerState", "SPEED_PRESETS", "MAX_TICKS_PER_FRAME",
]
