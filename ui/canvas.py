"""
canvas.py — SVG Bar Renderer
=============================
Pure rendering function: AlgoState → SVG string.

One bar per array slot, height proportional to the value.  Colour comes
from the transient hints on the state, in priority order:

    swap  >  compare  >  pivot  >  overwrite  >  merge window  >  sorted  >  default

Design decisions:
  - NO mutation.  The caller passes the state, gets back a string.
  - Hints are only valid for the tick that produced them, so rendering a
    scrubbed-to Race shows exactly what that tick touched.
"""

from typing import Dict, Optional

from algorithms import AlgoState


# ---------------------------------------------------------------------------
# Visual Config — colour palette, dimensions
# ---------------------------------------------------------------------------
class CanvasConfig:
    width:   int = 640
    height:  int = 260
    bg:      str = "#0d1117"
    gap:     int = 1

    bar_colors: Dict[str, str] = {
        "default":   "#475569",   # slate
        "compare":   "#38bdf8",   # sky
        "swap":      "#fb7185",   # rose
        "pivot":     "#fbbf24",   # amber
        "merge":     "#818cf8",   # indigo
        "overwrite": "#67e8f9",   # cyan
        "sorted":    "#34d399",   # emerald
    }


CONFIG = CanvasConfig()


def bar_role(state: AlgoState, index: int) -> str:
    """Which palette entry slot `index` gets on this tick."""
    if state.active_swap and index in state.active_swap:
        return "swap"
    if state.active_compare and index in state.active_compare:
        return "compare"
    if state.pivot_index == index:
        return "pivot"
    if state.last_overwrite == index:
        return "overwrite"
    if state.merge_window and state.merge_window[0] <= index <= state.merge_window[1]:
        return "merge"
    if state.sorted[index]:
        return "sorted"
    return "default"


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_bars(state: Optional[AlgoState], config: CanvasConfig = CONFIG) -> str:
    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
    ]

    if state is not None and state.array:
        n       = len(state.array)
        peak    = max(max(state.array), 1)
        slot    = config.width / n
        bar_w   = max(slot - config.gap, 1)

        for index, value in enumerate(state.array):
            h    = max(value / peak * (config.height - 4), 1)
            x    = index * slot
            y    = config.height - h
            role = bar_role(state, index)
            svg_parts.append(
                f'<rect class="bar {role}" data-index="{index}" x="{x:.2f}" y="{y:.2f}" '
                f'width="{bar_w:.2f}" height="{h:.2f}" fill="{config.bar_colors[role]}"/>'
            )

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)
