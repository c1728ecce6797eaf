from __future__ import annotations

import logging
from typing import Collection

import pandas as pd

from .models import PlaceRecord

logger = logging.getLogger(__name__)


def _matched_types(place: PlaceRecord, preferred: set[str]) -> int:
    return sum(1 for t in place.types if t in preferred)


def rank_places(
    places: list[PlaceRecord],
    visited_names: Collection[str],
    preferred_types: Collection[str],
) -> list[PlaceRecord]:
    """
    Order places for selection.

    1. Places the user has not visited come before visited ones (matched by
       exact name, so namesakes count as visited too).
    2. With preferred types, more matching types come first.
    3. Otherwise the incoming order (provider popularity) is kept, which is
       why the sort must be stable.
    """
    if not places:
        return []

    preferred = set(preferred_types)
    df = pd.DataFrame({
        "_visited": [p.name in visited_names for p in places],
        "_matches": [_matched_types(p, preferred) if preferred else 0 for p in places],
    })
    ordered = df.sort_values(["_visited", "_matches"], ascending=[True, False], kind="stable")
    ranked = [places[i] for i in ordered.index]

    logger.info("Ranked %d places. Top is: %s", len(ranked), ranked[0].name)
    return ranked
