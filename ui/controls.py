"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – start/pause/step/reset, speed, lockstep toggle
  • dataset_controls    – size, pattern, seed, generate
  • algorithm_selector  – per-lane algorithm dropdown
  • metrics_panel       – side-by-side counters + winner
  • timeline_panel      – scrub bar, back/forward/latest, tick narration
  • race_notes_panel    – algorithm descriptions + colour legend
  • pseudocode_viewer   – static listing for a lane's algorithm

Design:
  - All panels are stateless render functions.
  - Input is the plain dict from Session.snapshot() (or pieces of it).
  - Output is raw HTML strings (no templating engine).
"""

from typing import Any, Dict, List, Optional

from algorithms import AlgoInfo, StepEvent
from dataset import PATTERNS


def format_number(value: float) -> str:
    return f"{round(value):,}"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_playing: bool = False,
    all_done: bool = False,
    speed: float = 24,
    lockstep: bool = True,
) -> str:
    play_label = "Pause" if is_playing else "Start"
    disabled = "disabled" if all_done else ""

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Race</h3>
      <div class="button-row">
        <button id="btn-play" {disabled}>{play_label}</button>
        <button id="btn-step" {disabled}>Step</button>
        <button id="btn-reset">Reset</button>
      </div>
      <label for="speed-input">Speed (ticks/s): <span id="speed-value">{format_number(speed)}</span></label>
      <input id="speed-input" type="range" min="1" max="400" value="{int(speed)}">
      <label for="lockstep-toggle">Lockstep mode</label>
      <input id="lockstep-toggle" type="checkbox" {'checked' if lockstep else ''}>
    </div>
    """


# ---------------------------------------------------------------------------
# Dataset Controls
# ---------------------------------------------------------------------------
def dataset_controls(size: int = 60, pattern: str = "random", seed: Optional[int] = None) -> str:
    options = []
    for key, label in PATTERNS.items():
        sel = "selected" if key == pattern else ""
        options.append(f'<option value="{key}" {sel}>{label}</option>')

    return f"""
    <div class="panel dataset-controls">
      <h3>🎲 Dataset</h3>
      <label for="size-input">Size</label>
      <input id="size-input" type="number" min="2" max="300" value="{size}">
      <label for="pattern-selector">Pattern</label>
      <select id="pattern-selector">{''.join(options)}</select>
      <label for="seed-input">Seed</label>
      <input id="seed-input" type="text" value="{'' if seed is None else seed}">
      <div class="button-row">
        <button id="btn-generate">Generate</button>
        <button id="btn-auto-seed">Random seed</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(lane: str, algorithms: List[AlgoInfo], selected_key: str) -> str:
    options = []
    for algo in algorithms:
        sel = "selected" if algo.key == selected_key else ""
        options.append(f'<option value="{algo.key}" {sel}>{algo.label} — {algo.big_o}</option>')

    return f"""
    <div class="algorithm-selector" data-lane="{lane}">
      <label for="algo-{lane}">{lane.capitalize()} lane</label>
      <select id="algo-{lane}" class="algo-selector" data-lane="{lane}">
        {''.join(options)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Metrics Panel
# ---------------------------------------------------------------------------
METRIC_ROWS = [
    ("comparisons",    "comparisons"),
    ("swaps",          "swaps"),
    ("overwrites",     "overwrites"),
    ("steps executed", "steps"),
    ("time (ticks)",   "elapsed_ticks"),
]


def metrics_panel(snapshot: Dict[str, Any]) -> str:
    left  = snapshot["lanes"]["left"]
    right = snapshot["lanes"]["right"]

    rows = []
    for title, key in METRIC_ROWS:
        rows.append(
            f"<tr><td>{title}</td>"
            f"<td>{format_number(left['state']['metrics'][key])}</td>"
            f"<td>{format_number(right['state']['metrics'][key])}</td></tr>"
        )
    rows.append(
        f"<tr><td>isDone</td><td>{format_bool(left['state']['done'])}</td>"
        f"<td>{format_bool(right['state']['done'])}</td></tr>"
    )
    rows.append(
        f"<tr><td>isSorted</td><td>{format_bool(left['is_sorted'])}</td>"
        f"<td>{format_bool(right['is_sorted'])}</td></tr>"
    )

    return f"""
    <div class="panel metrics-panel">
      <h3>📊 Live Metrics</h3>
      <p class="winner">Winner: <strong>{_escape(snapshot['winner']['label'])}</strong></p>
      <table>
        <thead><tr><th>Metric</th><th>{left['label']}</th><th>{right['label']}</th></tr></thead>
        <tbody>{''.join(rows)}</tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Timeline Panel
# ---------------------------------------------------------------------------
def _event_list(events: List[Dict[str, Any]]) -> str:
    if not events:
        return '<p class="placeholder">No events in this step.</p>'
    items = [f"<li>{StepEvent(**event).label()}</li>" for event in events]
    return f'<ul class="event-list">{"".join(items)}</ul>'


def timeline_panel(timeline: Dict[str, Any], entry: Optional[Dict[str, Any]] = None) -> str:
    base, latest, cursor = timeline["base_step"], timeline["latest_step"], timeline["cursor_step"]
    at_base   = "disabled" if cursor <= base else ""
    at_latest = "disabled" if cursor >= latest else ""

    if entry is None:
        narration = '<p class="placeholder">Scrub to a recorded tick to see its events.</p>'
    else:
        narration = f"""
        <div class="lane-events"><h4>Left</h4>{_event_list(entry['left_events'])}</div>
        <div class="lane-events"><h4>Right</h4>{_event_list(entry['right_events'])}</div>
        """

    return f"""
    <div class="panel timeline-panel">
      <h3>🕘 Timeline</h3>
      <input id="timeline-scrub" type="range" min="{base}" max="{latest}" value="{cursor}">
      <div class="step-info">
        Step <span id="cursor-step">{cursor}</span> / <span id="latest-step">{latest}</span>
        (history keeps {format_number(timeline['history_cap'])} ticks)
        {'' if timeline['is_live'] else '<span class="historical-badge">HISTORY</span>'}
      </div>
      <div class="button-row">
        <button id="btn-back" {at_base}>◀</button>
        <button id="btn-forward" {at_latest}>▶</button>
        <button id="btn-latest" {at_latest}>⏭ Latest</button>
      </div>
      {narration}
    </div>
    """


# ---------------------------------------------------------------------------
# Race Notes
# ---------------------------------------------------------------------------
LEGEND = [
    ("Compare",      "compare"),
    ("Swap",         "swap"),
    ("Pivot",        "pivot"),
    ("Merge window", "merge"),
    ("Overwrite",    "overwrite"),
    ("Sorted",       "sorted"),
]


def race_notes_panel(left: AlgoInfo, right: AlgoInfo, lockstep: bool = True) -> str:
    mode = (
        "Lockstep mode is ON: both lanes execute exactly one algorithm step each tick."
        if lockstep else
        "Lockstep mode is OFF: each lane advances independently based on tick accumulation."
    )
    legend = "".join(f'<span class="legend {cls}">{label}</span>' for label, cls in LEGEND)

    return f"""
    <div class="panel race-notes">
      <h3>💡 Race Notes</h3>
      <p>{mode}</p>
      <p><strong>Left: {left.label}</strong><br>{_escape(left.description)}</p>
      <p><strong>Right: {right.label}</strong><br>{_escape(right.description)}</p>
      <div class="legend-row">{legend}</div>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(info: Optional[AlgoInfo]) -> str:
    if info is None or not info.pseudocode:
        return '<div class="code-block"><div class="placeholder">No pseudocode.</div></div>'

    lines_html = [
        f'<div class="code-line" data-line="{i}">{_escape(line)}</div>'
        for i, line in enumerate(info.pseudocode)
    ]
    return f"""
    <div class="code-block" data-algo="{info.key}">
      {''.join(lines_html)}
    </div>
    """
