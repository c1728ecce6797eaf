from __future__ import annotations

import logging
import random
from typing import Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Two or fewer candidates are returned as ranked.
_SHUFFLE_THRESHOLD = 2


def sample_top(
    ranked: Sequence[T],
    rng: random.Random,
    top_n: int = 10,
    pick: int = 2,
) -> list[T]:
    """Shuffle the best ``top_n`` candidates and return the first ``pick``.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every ordering of
    the top slice is equally likely for a given source of randomness.
    """
    candidates = list(ranked[:top_n])
    if len(candidates) > _SHUFFLE_THRESHOLD:
        rng.shuffle(candidates)
        logger.debug("Shuffled top %d candidates", len(candidates))
    return candidates[:pick]
