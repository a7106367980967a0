"""
dataset/
--------
Input side of a race.  Public API:

    from dataset import generate_dataset, PATTERNS
    from dataset import normalize_seed, random_seed
"""

from dataset.patterns import generate_dataset, PATTERNS
from dataset.seeds    import normalize_seed, random_seed, string_hash

__all__ = [
    "generate_dataset", "PATTERNS",
    "normalize_seed",   "random_seed", "string_hash",
]
