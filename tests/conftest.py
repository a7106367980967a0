from __future__ import annotations

import pytest

from algorithms import require_algorithm


@pytest.fixture
def run_to_end():
    """Drive one algorithm from init to done; returns (final_state, per-step events)."""

    def _run(key: str, data: list[int], limit: int = 100_000):
        info = require_algorithm(key)
        state = info.init(data)
        trace = []
        while not state.done:
            assert len(trace) < limit, f"{key} did not finish within {limit} steps"
            result = info.step(state)
            trace.append(result.events)
            state = result.state
        return state, trace

    return _run
