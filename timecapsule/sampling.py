from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle(seq: Sequence[T], rng: Optional[random.Random] = None) -> list[T]:
    """Return a shuffled copy of ``seq`` (Fisher-Yates); ``seq`` is left untouched."""
    rng = rng or random
    out = list(seq)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def take(seq: Sequence[T], limit: int) -> list[T]:
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    return list(seq[:limit])
