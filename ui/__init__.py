"""
ui/
---
Presentation layer.

    from ui import render_bars
    from ui import playback_controls, metrics_panel, timeline_panel, …
"""

from ui.canvas import render_bars, bar_role, CanvasConfig

from ui.controls import (
    playback_controls,
    dataset_controls,
    algorithm_selector,
    metrics_panel,
    timeline_panel,
    race_notes_panel,
    pseudocode_viewer,
    format_number,
    format_bool,
)

__all__ = [
    "render_bars",
    "bar_role",
    "CanvasConfig",
    "playback_controls",
    "dataset_controls",
    "algorithm_selector",
    "metrics_panel",
    "timeline_panel",
    "race_notes_panel",
    "pseudocode_viewer",
    "format_number",
    "format_bool",
]
