"""
patterns.py — Dataset Generator
================================
Builds the shared input both lanes race on.  Same (size, pattern, seed)
always gives the same list.

Patterns:
  • random         – uniform ints in [12, 1000]
  • nearly-sorted  – sorted, then ~8% of positions randomly swapped
  • reversed       – sorted descending
  • few-unique     – drawn from a pool of 5 values
"""

import random
from typing import Dict, List

VALUE_RANGE        = (12, 1000)
FEW_UNIQUE_RANGE   = (40, 960)
FEW_UNIQUE_POOL    = 5
NEARLY_SORTED_FRAC = 0.08

PATTERNS: Dict[str, str] = {
    "random":        "Random",
    "nearly-sorted": "Nearly sorted",
    "reversed":      "Reversed",
    "few-unique":    "Few unique values",
}


def generate_dataset(size: int, pattern: str = "random", seed: int = 0) -> List[int]:
    if pattern not in PATTERNS:
        raise ValueError(f"Unknown dataset pattern: {pattern}")
    if size < 0:
        raise ValueError(f"Dataset size must be >= 0, got {size}")

    rng  = random.Random(seed)
    base = [rng.randint(*VALUE_RANGE) for _ in range(size)]

    if pattern == "random":
        return base

    if pattern == "nearly-sorted":
        values = sorted(base)
        for _ in range(max(1, int(size * NEARLY_SORTED_FRAC))):
            if size == 0:
                break
            left  = rng.randint(0, size - 1)
            right = rng.randint(0, size - 1)
            values[left], values[right] = values[right], values[left]
        return values

    if pattern == "reversed":
        return sorted(base, reverse=True)

    pool = sorted(rng.randint(*FEW_UNIQUE_RANGE) for _ in range(FEW_UNIQUE_POOL))
    return [rng.choice(pool) for _ in range(size)]
