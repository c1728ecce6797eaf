from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True)
class CacheConfig:
    db_path: Path = Path(os.getenv("PLACE_CACHE_PATH", str(_DATA_DIR / "place_cache.sqlite")))
    max_entries_per_key: int = 5
    max_age_seconds: int | None = _optional_int("PLACE_CACHE_MAX_AGE")


@dataclass(frozen=True)
class RecommendationConfig:
    coord_precision: float = 0.001  # ~111 m of latitude
    default_radius_m: int = 3000
    default_min_rating: float = 3.5
    top_n: int = 10
    pick: int = 2


DEFAULT_CACHE_CONFIG = CacheConfig()
DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
