"""Level selection for new nodes and the level-ceiling growth rule.

Node heights follow a geometric distribution: with promotion probability
``p`` a node reaches height ``k`` or more with probability ``p ** (k - 1)``.
Instead of flipping one coin per level, the height is computed in one step
from a single uniform draw ``u``::

    height = floor(log(u) / log(p)) + 1

The result is clamped so that a node is never more than one level taller than
the tallest level currently in use, and never taller than the head node.
"""
from __future__ import annotations

import math
import random
from typing import Optional

from .errors import InvalidArgumentError

__all__ = ["LevelOracle", "desired_ceiling"]


class LevelOracle:
    """Per-container source of random node heights.

    Parameters
    ----------
    probability: float
        Promotion probability, strictly between 0 and 1.
    seed: int | None
        Seed for the private :class:`random.Random` instance. ``None`` seeds
        from the OS.
    """

    __slots__ = ("probability", "_log_p", "_rng")

    def __init__(self, probability: float, seed: Optional[int] = None) -> None:
        if not 0.0 < probability < 1.0:
            raise InvalidArgumentError(f"promotion probability must be in (0, 1), got {probability!r}")
        self.probability = probability
        self._log_p = math.log(probability)
        self._rng = random.Random(seed)

    def draw(self, current_max_level: int, level_ceiling: int) -> int:
        """Return a height in ``[1, min(current_max_level + 1, level_ceiling)]``."""
        u = 1.0 - self._rng.random()  # (0, 1]
        height = int(math.log(u) / self._log_p) + 1
        return min(height, current_max_level + 1, level_ceiling)


def desired_ceiling(count: int) -> int:
    """Number of head levels wanted for a container holding *count* items.

    One extra level per decade of elements: 1 for 0..8 items, 2 from 9, 3
    from 99 and so on.
    """
    return int(math.log10(count + 1)) + 1
