"""Seeded, reproducible sampling of an exam's questions."""
import random
from typing import List, Optional, Sequence


def make_rng(seed: Optional[int] = None) -> random.Random:
    """A fresh generator per draw; unseeded generators take OS entropy"""
    if seed is None:
        return random.Random()
    return random.Random(seed)


def draw_questions(all_ids: Sequence[str], count: int, seed: Optional[int] = None,
                   rng: Optional[random.Random] = None) -> List[str]:
    """Shuffle a copy of ``all_ids`` and take the first ``count`` entries.

    ``count`` is clamped to the bank size. The returned order is the exam's
    presentation order. The same ids and seed always produce the same draw.
    """
    rng = rng or make_rng(seed)
    out = list(all_ids)
    rng.shuffle(out)  # Fisher-Yates
    count = max(0, min(count, len(out)))
    return out[:count]
