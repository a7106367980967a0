"""
seeds.py — Seed Normalisation
==============================
Turns whatever the operator typed into the seed box into a 32-bit
unsigned integer.

    normalize_seed(42)        → 42
    normalize_seed(" 17 ")    → 17
    normalize_seed("12abc")   → 12        (leading integer wins)
    normalize_seed("banana")  → FNV-1a hash of "banana"
    normalize_seed("")        → fresh random seed
"""

import math
import random
import re
import time
from typing import Optional, Union

UINT32_MASK = 0xFFFFFFFF

_FNV_OFFSET = 2166136261
_FNV_PRIME  = 16777619

_LEADING_INT = re.compile(r"^[+-]?\d+")


def string_hash(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of `text`."""
    raw = text.encode("utf-16-le")
    value = _FNV_OFFSET
    for k in range(0, len(raw), 2):
        value ^= raw[k] | (raw[k + 1] << 8)
        value = (value * _FNV_PRIME) & UINT32_MASK
    return value


def random_seed() -> int:
    return ((time.time_ns() // 1_000_000) ^ random.getrandbits(32)) & UINT32_MASK


def normalize_seed(value: Optional[Union[str, int, float]] = None) -> int:
    if isinstance(value, bool):
        value = int(value)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return random_seed()
        return int(value) & UINT32_MASK

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return random_seed()
        match = _LEADING_INT.match(text)
        if match:
            return int(match.group(0)) & UINT32_MASK
        return string_hash(text)

    return random_seed()
