"""
main.py — Sort Race Visualizer Flask App
=========================================
The web server that hosts a race.

Routes:
  GET  /                        – main UI
  GET  /api/state               – current race snapshot (for polling)
  POST /api/generate            – new dataset  (size, pattern, seed)
  POST /api/reset               – restart both lanes on the same dataset
  POST /api/algorithm           – swap one lane's algorithm
  POST /api/step                – one lockstep tick
  POST /api/advance             – N ticks per lane
  POST /api/play                – toggle play/pause
  POST /api/frame               – animation frame: run whatever ticks are due
  POST /api/timeline/scrub      – jump the timeline cursor to step N
  POST /api/timeline/back       – cursor - 1
  POST /api/timeline/forward    – cursor + 1
  POST /api/timeline/latest     – cursor = latest
  POST /api/config/speed        – ticks per second
  POST /api/config/lockstep     – lockstep on/off

State management:
  Races live in an in-memory dict keyed by a random id stored in the
  Flask session cookie.  Each slot holds:
    • session    – the engine Session (race + timeline)
    • scheduler  – the FrameScheduler pacing /api/frame
    • lock       – serialises requests for that slot
  At most MAX_SLOTS races are kept; the least recently used is evicted.

Configuration:
  Defaults below, overridable with SORTRACE_* environment variables,
  e.g.  SORTRACE_HISTORY_CAP=2000  SORTRACE_LOG_LEVEL=DEBUG
"""

from flask import Flask, render_template_string, request, jsonify, session
import logging
import secrets
import threading
from collections import OrderedDict
import sys
import os
from dataclasses import dataclass, field
from typing import Any, Dict

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from algorithms import get_algorithm, list_algorithms
from engine import FrameScheduler, RaceSettings, Session, LANES
from engine.scheduler import DEFAULT_SPEED, SPEED_PRESETS
from engine.session import DEFAULT_LEFT, DEFAULT_PATTERN, DEFAULT_RIGHT, DEFAULT_SIZE
from engine.timeline import CHECKPOINT_INTERVAL, HISTORY_CAP
from ui import (
    render_bars,
    playback_controls,
    dataset_controls,
    algorithm_selector,
    metrics_panel,
    timeline_panel,
    race_notes_panel,
    pseudocode_viewer,
)


app = Flask(__name__)
app.config.from_mapping(
    SECRET_KEY=secrets.token_hex(32),
    DEFAULT_SIZE=DEFAULT_SIZE,
    DEFAULT_PATTERN=DEFAULT_PATTERN,
    DEFAULT_LEFT=DEFAULT_LEFT,
    DEFAULT_RIGHT=DEFAULT_RIGHT,
    DEFAULT_SPEED=DEFAULT_SPEED,
    HISTORY_CAP=HISTORY_CAP,
    CHECKPOINT_INTERVAL=CHECKPOINT_INTERVAL,
    MAX_SLOTS=256,
    LOG_LEVEL="INFO",
)
app.config.from_prefixed_env("SORTRACE")


# ---------------------------------------------------------------------------
# Session Store
# ---------------------------------------------------------------------------
@dataclass
class RaceSlot:
    session:    Session
    scheduler:  FrameScheduler
    lock:       threading.Lock = field(default_factory=threading.Lock)


_SLOTS: "OrderedDict[str, RaceSlot]" = OrderedDict()
_SLOTS_LOCK = threading.Lock()


def default_settings() -> RaceSettings:
    return RaceSettings(
        size=int(app.config["DEFAULT_SIZE"]),
        pattern=app.config["DEFAULT_PATTERN"],
        history_cap=int(app.config["HISTORY_CAP"]),
        checkpoint_interval=int(app.config["CHECKPOINT_INTERVAL"]),
    )


def get_slot() -> RaceSlot:
    """
    This browser's race, created on first use.  The store is LRU-bounded
    by MAX_SLOTS; an evicted browser simply gets a fresh race.
    """
    sid = session.get("sid")
    with _SLOTS_LOCK:
        if sid is not None and sid in _SLOTS:
            _SLOTS.move_to_end(sid)
        else:
            sid = secrets.token_hex(16)
            session["sid"] = sid
            _SLOTS[sid] = RaceSlot(
                session=Session.generate(
                    seed=None,
                    left=app.config["DEFAULT_LEFT"],
                    right=app.config["DEFAULT_RIGHT"],
                    settings=default_settings(),
                ),
                scheduler=FrameScheduler(speed=float(app.config["DEFAULT_SPEED"])),
            )
            app.logger.info("created race slot %s", sid)
            while len(_SLOTS) > max(int(app.config["MAX_SLOTS"]), 1):
                evicted, _ = _SLOTS.popitem(last=False)
                app.logger.info("evicted idle race slot %s", evicted)
        return _SLOTS[sid]


def payload(slot: RaceSlot) -> Dict[str, Any]:
    """Snapshot + pre-rendered fragments for the page."""
    snap = slot.session.snapshot()
    race = slot.session.race
    snap.update({
        "is_playing": slot.scheduler.is_playing,
        "speed":      slot.scheduler.speed,
        "lockstep":   slot.scheduler.lockstep,
        "left_svg":   render_bars(race.left.state),
        "right_svg":  render_bars(race.right.state),
        "left_code":  pseudocode_viewer(get_algorithm(race.left.algorithm)),
        "right_code": pseudocode_viewer(get_algorithm(race.right.algorithm)),
        "metrics":    metrics_panel(snap),
        "timeline_html": timeline_panel(snap["timeline"], snap["active_entry"]),
        "playback":   playback_controls(
            is_playing=slot.scheduler.is_playing,
            all_done=snap["all_done"],
            speed=slot.scheduler.speed,
            lockstep=slot.scheduler.lockstep,
        ),
    })
    return snap


def _json() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _int_arg(data: Dict[str, Any], key: str, default: int) -> int:
    try:
        return int(data.get(key, default))
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be an integer")


@app.errorhandler(ValueError)
def handle_value_error(exc: ValueError):
    return jsonify({"error": str(exc)}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    slot = get_slot()
    with slot.lock:
        data  = payload(slot)
        race  = slot.session.race
        algos = list_algorithms()
        left_info  = get_algorithm(race.left.algorithm)
        right_info = get_algorithm(race.right.algorithm)

        html = render_template_string(INDEX_TEMPLATE,
            left_svg=data["left_svg"],
            right_svg=data["right_svg"],
            left_label=data["lanes"]["left"]["label"],
            right_label=data["lanes"]["right"]["label"],
            playback=data["playback"],
            dataset=dataset_controls(
                size=data["size"], pattern=data["pattern"], seed=data["seed"],
            ),
            left_selector=algorithm_selector("left", algos, race.left.algorithm),
            right_selector=algorithm_selector("right", algos, race.right.algorithm),
            metrics=data["metrics"],
            timeline=data["timeline_html"],
            notes=race_notes_panel(left_info, right_info, slot.scheduler.lockstep),
            left_code=pseudocode_viewer(left_info),
            right_code=pseudocode_viewer(right_info),
            seed=data["seed"],
            size=data["size"],
        )
    return html


@app.route("/api/state")
def api_state():
    slot = get_slot()
    with slot.lock:
        return jsonify(payload(slot))


# ---------------------------------------------------------------------------
# API: Race lifecycle (each of these starts a fresh timeline)
# ---------------------------------------------------------------------------
@app.route("/api/generate", methods=["POST"])
def api_generate():
    data = _json()
    slot = get_slot()
    with slot.lock:
        current = slot.session
        slot.session = current.regenerate(
            size=_int_arg(data, "size", current.settings.size),
            pattern=data.get("pattern", current.settings.pattern),
            seed=data.get("seed"),
        )
        slot.scheduler.reset()
        return jsonify(payload(slot))


@app.route("/api/reset", methods=["POST"])
def api_reset():
    slot = get_slot()
    with slot.lock:
        slot.session = slot.session.reset()
        slot.scheduler.reset()
        return jsonify(payload(slot))


@app.route("/api/algorithm", methods=["POST"])
def api_algorithm():
    data = _json()
    lane = data.get("lane", "")
    if lane not in LANES:
        return jsonify({"error": f"Unknown lane: {lane}"}), 400

    slot = get_slot()
    with slot.lock:
        slot.session = slot.session.with_algorithm(lane, data.get("algo_key", ""))
        slot.scheduler.reset()
        return jsonify(payload(slot))


# ---------------------------------------------------------------------------
# API: Advancing
# ---------------------------------------------------------------------------
@app.route("/api/step", methods=["POST"])
def api_step():
    slot = get_slot()
    with slot.lock:
        recorded = slot.session.step()
        return jsonify({**payload(slot), "recorded": recorded})


@app.route("/api/advance", methods=["POST"])
def api_advance():
    data = _json()
    left  = _int_arg(data, "left", 1)
    right = _int_arg(data, "right", left)
    slot = get_slot()
    with slot.lock:
        recorded = slot.session.advance(left, right)
        return jsonify({**payload(slot), "recorded": recorded})


@app.route("/api/play", methods=["POST"])
def api_play():
    slot = get_slot()
    with slot.lock:
        slot.scheduler.toggle_play(slot.session)
        return jsonify(payload(slot))


@app.route("/api/frame", methods=["POST"])
def api_frame():
    slot = get_slot()
    with slot.lock:
        recorded = slot.scheduler.tick(slot.session)
        return jsonify({**payload(slot), "recorded": recorded})


# ---------------------------------------------------------------------------
# API: Timeline navigation (no new computation)
# ---------------------------------------------------------------------------
@app.route("/api/timeline/scrub", methods=["POST"])
def api_timeline_scrub():
    target = _int_arg(_json(), "step", 0)
    slot = get_slot()
    with slot.lock:
        slot.scheduler.pause()
        slot.session.scrub(target)
        return jsonify(payload(slot))


@app.route("/api/timeline/back", methods=["POST"])
def api_timeline_back():
    slot = get_slot()
    with slot.lock:
        slot.scheduler.pause()
        slot.session.step_back()
        return jsonify(payload(slot))


@app.route("/api/timeline/forward", methods=["POST"])
def api_timeline_forward():
    slot = get_slot()
    with slot.lock:
        slot.scheduler.pause()
        slot.session.step_forward()
        return jsonify(payload(slot))


@app.route("/api/timeline/latest", methods=["POST"])
def api_timeline_latest():
    slot = get_slot()
    with slot.lock:
        slot.scheduler.pause()
        slot.session.jump_to_latest()
        return jsonify(payload(slot))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    data = _json()
    slot = get_slot()
    with slot.lock:
        speed = data.get("speed", DEFAULT_SPEED)
        if isinstance(speed, str) and speed in SPEED_PRESETS:
            slot.scheduler.set_speed(speed)
        else:
            try:
                slot.scheduler.set_speed_value(float(speed))
            except (TypeError, ValueError):
                raise ValueError("'speed' must be a number or a preset name")
        return jsonify({"speed": slot.scheduler.speed})


@app.route("/api/config/lockstep", methods=["POST"])
def api_config_lockstep():
    data = _json()
    slot = get_slot()
    with slot.lock:
        slot.scheduler.set_lockstep(bool(data.get("lockstep", True)))
        return jsonify({"lockstep": slot.scheduler.lockstep})


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sort Race Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
    }

    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      padding: 20px;
    }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 16px; margin-bottom: 16px; }
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
    }
    .panel h3 { font-size: 13px; text-transform: uppercase; color: var(--accent-cyan); margin-bottom: 10px; }
    .button-row { display: flex; gap: 8px; margin: 8px 0; }
    button {
      background: var(--accent-cyan);
      color: #fff;
      border: none;
      padding: 8px 14px;
      border-radius: 8px;
      cursor: pointer;
    }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    label { display: block; margin: 8px 0 4px; font-size: 12px; color: var(--text-secondary); }
    select, input[type="number"], input[type="text"] {
      width: 100%;
      padding: 6px 8px;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 6px;
      color: var(--text-primary);
    }
    input[type="range"] { width: 100%; }
    table { width: 100%; font-size: 13px; border-collapse: collapse; }
    table td, table th { padding: 4px; text-align: left; border-bottom: 1px solid var(--border); }
    .event-list { font-family: monospace; font-size: 12px; list-style: none; }
    .placeholder { color: var(--text-secondary); font-size: 12px; }
    .legend { display: inline-block; margin-right: 8px; font-size: 12px; }
    .code-line { font-family: monospace; font-size: 12px; white-space: pre; }
    footer { font-size: 12px; color: var(--text-secondary); }
  </style>
</head>
<body>
  <div class="grid">
    <div id="playback">{{ playback|safe }}</div>
    <div>
      {{ dataset|safe }}
      <div class="panel">{{ left_selector|safe }}{{ right_selector|safe }}</div>
    </div>
  </div>

  <div class="grid">
    <div class="panel">
      <h3 id="left-label">Left Lane — {{ left_label }}</h3>
      <div id="left-canvas">{{ left_svg|safe }}</div>
      <div id="left-code">{{ left_code|safe }}</div>
    </div>
    <div class="panel">
      <h3 id="right-label">Right Lane — {{ right_label }}</h3>
      <div id="right-canvas">{{ right_svg|safe }}</div>
      <div id="right-code">{{ right_code|safe }}</div>
    </div>
  </div>

  <div class="grid">
    <div id="metrics">{{ metrics|safe }}</div>
    <div id="timeline">{{ timeline|safe }}</div>
  </div>

  <div id="notes">{{ notes|safe }}</div>

  <footer>Seed: <span id="seed">{{ seed }}</span> | Dataset size: <span id="size">{{ size }}</span></footer>

  <script>
    // API helpers
    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      return await res.json();
    }

    let playing = false;

    function apply(data) {
      if (data.error) { alert(data.error); return; }
      if (data.left_svg) document.getElementById('left-canvas').innerHTML = data.left_svg;
      if (data.right_svg) document.getElementById('right-canvas').innerHTML = data.right_svg;
      if (data.left_code) document.getElementById('left-code').innerHTML = data.left_code;
      if (data.right_code) document.getElementById('right-code').innerHTML = data.right_code;
      if (data.metrics) document.getElementById('metrics').innerHTML = data.metrics;
      if (data.timeline_html) document.getElementById('timeline').innerHTML = data.timeline_html;
      if (data.playback) document.getElementById('playback').innerHTML = data.playback;
      if (data.seed !== undefined) document.getElementById('seed').textContent = data.seed;
      if (data.size !== undefined) document.getElementById('size').textContent = data.size;
      playing = !!data.is_playing;
      if (playing) requestAnimationFrame(frame);
    }

    async function frame() {
      if (!playing) return;
      apply(await post('/api/frame'));
    }

    // panels are re-rendered server-side, so delegate events from the document
    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (id === 'btn-play') apply(await post('/api/play'));
      if (id === 'btn-step') apply(await post('/api/step'));
      if (id === 'btn-reset') apply(await post('/api/reset'));
      if (id === 'btn-back') apply(await post('/api/timeline/back'));
      if (id === 'btn-forward') apply(await post('/api/timeline/forward'));
      if (id === 'btn-latest') apply(await post('/api/timeline/latest'));
      if (id === 'btn-generate' || id === 'btn-auto-seed') {
        const seed = id === 'btn-auto-seed' ? '' : document.getElementById('seed-input').value;
        const data = await post('/api/generate', {
          size: parseInt(document.getElementById('size-input').value, 10),
          pattern: document.getElementById('pattern-selector').value,
          seed: seed,
        });
        if (data.seed !== undefined) document.getElementById('seed-input').value = data.seed;
        apply(data);
      }
    });

    document.addEventListener('change', async (e) => {
      const t = e.target;
      if (t.classList.contains('algo-selector')) {
        const data = await post('/api/algorithm', {lane: t.dataset.lane, algo_key: t.value});
        if (data.lanes) {
          document.getElementById('left-label').textContent = 'Left Lane — ' + data.lanes.left.label;
          document.getElementById('right-label').textContent = 'Right Lane — ' + data.lanes.right.label;
        }
        apply(data);
      }
      if (t.id === 'speed-input') await post('/api/config/speed', {speed: parseInt(t.value, 10)});
      if (t.id === 'lockstep-toggle') await post('/api/config/lockstep', {lockstep: t.checked});
      if (t.id === 'timeline-scrub') apply(await post('/api/timeline/scrub', {step: parseInt(t.value, 10)}));
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Sort Race Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)
