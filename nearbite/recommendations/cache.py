"""
Durable cache of nearby-search responses.

Entries are keyed by (grid cell, radius, requested types) and appended to a
SQLite table; a lookup reads only the newest row for its key. The cache is
best-effort: any storage failure is logged and behaves like a miss.
"""
from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_CACHE_CONFIG, CacheConfig
from .errors import CacheUnavailable
from .models import CacheEntry, PlaceRecord, SearchQuery

logger = logging.getLogger(__name__)

_KEY_CLAUSE = "lat_round = ? AND lng_round = ? AND radius = ? AND types = ?"


def _types_key(types: tuple[str, ...]) -> str:
    # Order-sensitive: ["a", "b"] and ["b", "a"] are different keys.
    return json.dumps(list(types))


def _key_params(query: SearchQuery) -> tuple[Any, ...]:
    return (query.cell.lat, query.cell.lng, query.radius_m, _types_key(query.types))


class PlaceCache:
    def __init__(self, db_path: str | Path | None = None, config: CacheConfig = DEFAULT_CACHE_CONFIG):
        self.db_path = Path(db_path or config.db_path)
        self.max_entries_per_key = config.max_entries_per_key
        self.max_age_seconds = config.max_age_seconds
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS place_cache (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        lat_round REAL NOT NULL,
                        lng_round REAL NOT NULL,
                        radius INTEGER NOT NULL,
                        types TEXT NOT NULL,
                        response TEXT NOT NULL,
                        cached_at REAL NOT NULL
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_place_cache_key
                    ON place_cache(lat_round, lng_round, radius, types)
                    """
                )
                conn.commit()
            except (OSError, sqlite3.Error) as exc:
                raise CacheUnavailable(f"cannot open place cache at {self.db_path}") from exc
            self._conn = conn
        return self._conn

    def _read_latest(self, query: SearchQuery) -> CacheEntry | None:
        sql = f"SELECT response, cached_at FROM place_cache WHERE {_KEY_CLAUSE}"
        params: tuple[Any, ...] = _key_params(query)
        if self.max_age_seconds is not None:
            sql += " AND cached_at >= ?"
            params += (time.time() - self.max_age_seconds,)
        sql += " ORDER BY id DESC LIMIT 1"

        with self._lock:
            try:
                row = self._connect().execute(sql, params).fetchone()
            except sqlite3.Error as exc:
                raise CacheUnavailable("place cache read failed") from exc

        if row is None:
            return None
        response, cached_at = row
        try:
            places = [PlaceRecord.model_validate(item) for item in json.loads(response)]
        except ValueError as exc:
            raise CacheUnavailable("place cache entry is corrupt") from exc
        return CacheEntry(
            query=query,
            places=places,
            cached_at=datetime.fromtimestamp(cached_at, tz=timezone.utc),
        )

    def _append(self, query: SearchQuery, places: list[PlaceRecord]) -> None:
        payload = json.dumps([p.model_dump(mode="json") for p in places])
        key = _key_params(query)
        with self._lock:
            try:
                conn = self._connect()
                conn.execute(
                    """
                    INSERT INTO place_cache (lat_round, lng_round, radius, types, response, cached_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (*key, payload, time.time()),
                )
                conn.execute(
                    f"""
                    DELETE FROM place_cache WHERE {_KEY_CLAUSE} AND id NOT IN (
                        SELECT id FROM place_cache WHERE {_KEY_CLAUSE}
                        ORDER BY id DESC LIMIT ?
                    )
                    """,
                    (*key, *key, self.max_entries_per_key),
                )
                conn.commit()
            except sqlite3.Error as exc:
                raise CacheUnavailable("place cache write failed") from exc

    def lookup(self, query: SearchQuery) -> CacheEntry | None:
        """Return the newest entry for *query*, or ``None`` on a miss or failure."""
        try:
            entry = self._read_latest(query)
        except CacheUnavailable:
            logger.warning("Place cache lookup failed, treating as a miss", exc_info=True)
            entry = None

        with self._lock:
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
        return entry

    def store(self, query: SearchQuery, places: list[PlaceRecord]) -> None:
        """Append *places* under *query*. Failures are logged, never raised."""
        try:
            self._append(query, places)
        except CacheUnavailable:
            logger.warning("Place cache write failed, continuing without caching", exc_info=True)

    def count_entries(self) -> int:
        with self._lock:
            try:
                (count,) = self._connect().execute("SELECT COUNT(*) FROM place_cache").fetchone()
            except (CacheUnavailable, sqlite3.Error):
                logger.warning("Could not count place cache entries", exc_info=True)
                return 0
        return count

    def stats(self) -> dict:
        with self._lock:
            hits, misses = self._hits, self._misses
        total = hits + misses
        return {
            "entries": self.count_entries(),
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / total * 100, 1) if total > 0 else 0.0,
        }

    def reset_stats(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


_default_place_cache: PlaceCache | None = None
_default_place_cache_lock = threading.Lock()


def get_default_place_cache() -> PlaceCache:
    global _default_place_cache
    with _default_place_cache_lock:
        if _default_place_cache is None:
            _default_place_cache = PlaceCache()
    return _default_place_cache


def get_cache_stats() -> dict:
    return get_default_place_cache().stats()
