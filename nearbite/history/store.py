from __future__ import annotations

import threading
import time
from typing import Any

from ..auth.context import Anonymous, UserContext

_visits: list[dict[str, Any]] = []
_lock = threading.Lock()


def record_visit(
    user_id: str,
    restaurant_name: str,
    latitude: float,
    longitude: float,
    restaurant_types: list[str] | None = None,
) -> None:
    with _lock:
        _visits.append({
            "user_id": user_id,
            "restaurant_name": restaurant_name,
            "restaurant_types": list(restaurant_types or []),
            "latitude": latitude,
            "longitude": longitude,
            "timestamp": time.time(),
        })


def _visits_for(user_id: str) -> list[dict[str, Any]]:
    with _lock:
        return [v for v in _visits if v["user_id"] == user_id]


def get_visited_names(user: UserContext) -> set[str]:
    if isinstance(user, Anonymous):
        return set()
    return {v["restaurant_name"] for v in _visits_for(user.user_id)}


def get_visit_count(user: UserContext) -> int:
    if isinstance(user, Anonymous):
        return 0
    return len(_visits_for(user.user_id))


def get_visit_locations(user: UserContext) -> list[dict[str, float]]:
    """Visit coordinates for a heat map, one point per visit."""
    if isinstance(user, Anonymous):
        return []
    return [
        {"latitude": v["latitude"], "longitude": v["longitude"], "weight": 1}
        for v in _visits_for(user.user_id)
    ]


def clear_visits() -> None:
    with _lock:
        _visits.clear()
