from __future__ import annotations

import logging
import threading
import time

import pytest

from nearbite.recommendations import cache as cache_module
from nearbite.recommendations.cache import PlaceCache, get_default_place_cache
from nearbite.recommendations.config import CacheConfig
from nearbite.recommendations.geo import to_cell
from nearbite.recommendations.models import (
    BusinessStatus,
    Location,
    PlaceLinks,
    PlaceRecord,
    PriceTier,
    SearchQuery,
)

QUERY = SearchQuery(cell=to_cell(13.7563, 100.5018), radius_m=2000, types=("thai_restaurant", "cafe"))


def _place(name: str, **kwargs) -> PlaceRecord:
    return PlaceRecord(
        name=name,
        address=kwargs.pop("address", "1 Sukhumvit Rd"),
        rating=kwargs.pop("rating", 4.3),
        user_rating_count=kwargs.pop("user_rating_count", 120),
        business_status=BusinessStatus.operational,
        price_level=kwargs.pop("price_level", PriceTier.moderate),
        types=kwargs.pop("types", ["thai_restaurant", "restaurant"]),
        location=Location(lat=13.7565, lng=100.5020),
        photos=[{"name": "places/abc/photos/1", "widthPx": 400}],
        links=PlaceLinks(directions_uri="https://maps.example/d"),
        **kwargs,
    )


@pytest.fixture
def cache(tmp_path):
    c = PlaceCache(db_path=tmp_path / "place_cache.sqlite")
    yield c
    c.close()


def test_store_then_lookup_round_trips_places(cache):
    places = [_place("Baan Thai"), _place("Som Tam Nua", rating=None, price_level=None)]
    cache.store(QUERY, places)

    entry = cache.lookup(QUERY)

    assert entry is not None
    assert entry.query == QUERY
    assert entry.places == places
    assert isinstance(entry.places[0].types, tuple)
    assert entry.cached_at.tzinfo is not None


def test_lookup_miss_returns_none(cache):
    assert cache.lookup(QUERY) is None
    assert cache.stats()["misses"] == 1


def test_latest_write_wins(cache):
    cache.store(QUERY, [_place("Old")])
    cache.store(QUERY, [_place("New")])

    entry = cache.lookup(QUERY)

    assert [p.name for p in entry.places] == ["New"]


def test_types_order_is_part_of_the_key(cache):
    cache.store(QUERY, [_place("Baan Thai")])
    reordered = SearchQuery(cell=QUERY.cell, radius_m=QUERY.radius_m, types=("cafe", "thai_restaurant"))

    assert cache.lookup(reordered) is None


def test_radius_is_part_of_the_key(cache):
    cache.store(QUERY, [_place("Baan Thai")])
    wider = SearchQuery(cell=QUERY.cell, radius_m=3000, types=QUERY.types)

    assert cache.lookup(wider) is None


def test_nearby_location_hits_same_entry(cache):
    cache.store(QUERY, [_place("Baan Thai")])
    nearby = SearchQuery(cell=to_cell(13.75634, 100.50177), radius_m=2000, types=QUERY.types)

    assert cache.lookup(nearby) is not None


def test_entries_survive_reopening(tmp_path):
    path = tmp_path / "place_cache.sqlite"
    first = PlaceCache(db_path=path)
    first.store(QUERY, [_place("Baan Thai")])
    first.close()

    second = PlaceCache(db_path=path)
    try:
        entry = second.lookup(QUERY)
    finally:
        second.close()

    assert [p.name for p in entry.places] == ["Baan Thai"]


def test_retention_keeps_newest_entries_per_key(tmp_path):
    c = PlaceCache(db_path=tmp_path / "c.sqlite", config=CacheConfig(max_entries_per_key=2))
    other = SearchQuery(cell=QUERY.cell, radius_m=500, types=("restaurant",))
    try:
        for i in range(4):
            c.store(QUERY, [_place(f"v{i}")])
        c.store(other, [_place("other")])

        assert c.count_entries() == 3
        assert [p.name for p in c.lookup(QUERY).places] == ["v3"]
    finally:
        c.close()


def test_expired_entries_are_invisible(tmp_path, monkeypatch):
    c = PlaceCache(db_path=tmp_path / "c.sqlite", config=CacheConfig(max_age_seconds=60))
    try:
        c.store(QUERY, [_place("Baan Thai")])
        now = time.time()
        monkeypatch.setattr("nearbite.recommendations.cache.time.time", lambda: now + 120)

        assert c.lookup(QUERY) is None
    finally:
        c.close()


def test_read_failure_is_treated_as_miss(cache, caplog):
    cache.store(QUERY, [_place("Baan Thai")])
    cache._connect().execute("DROP TABLE place_cache")

    with caplog.at_level(logging.WARNING):
        assert cache.lookup(QUERY) is None

    assert "treating as a miss" in caplog.text
    assert cache.stats()["misses"] == 1


def test_write_failure_is_swallowed(cache, caplog):
    cache._connect().execute("DROP TABLE place_cache")

    with caplog.at_level(logging.WARNING):
        cache.store(QUERY, [_place("Baan Thai")])

    assert "continuing without caching" in caplog.text


def test_corrupt_entry_is_treated_as_miss(cache):
    conn = cache._connect()
    conn.execute(
        "INSERT INTO place_cache (lat_round, lng_round, radius, types, response, cached_at) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (QUERY.cell.lat, QUERY.cell.lng, QUERY.radius_m, '["thai_restaurant", "cafe"]', "not json{{", time.time()),
    )
    conn.commit()

    assert cache.lookup(QUERY) is None


def test_unopenable_database_degrades_gracefully(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    c = PlaceCache(db_path=blocker / "place_cache.sqlite")

    c.store(QUERY, [_place("Baan Thai")])
    assert c.lookup(QUERY) is None
    assert c.count_entries() == 0


def test_stats_report_hit_rate(cache):
    cache.store(QUERY, [_place("Baan Thai")])
    cache.lookup(QUERY)
    cache.lookup(QUERY)
    cache.lookup(SearchQuery(cell=QUERY.cell, radius_m=1, types=("cafe",)))

    stats = cache.stats()

    assert stats == {"entries": 1, "hits": 2, "misses": 1, "hit_rate": 66.7}

    cache.reset_stats()
    assert cache.stats()["hits"] == 0


def test_concurrent_store_and_lookup_share_one_connection(tmp_path):
    c = PlaceCache(db_path=tmp_path / "c.sqlite", config=CacheConfig(max_entries_per_key=5))
    errors = []
    rounds = 50
    workers = 8

    def worker(n):
        try:
            for i in range(rounds):
                c.store(QUERY, [_place(f"w{n}-{i}")])
                c.lookup(QUERY)
                c.stats()
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        stats = c.stats()
        assert stats["hits"] + stats["misses"] == rounds * workers
        assert stats["misses"] == 0
        assert c.count_entries() == 5
    finally:
        c.close()


def test_default_cache_is_created_once_across_threads(monkeypatch, tmp_path):
    created = []
    start = threading.Barrier(6)

    def slow_cache():
        c = PlaceCache(db_path=tmp_path / "default.sqlite")
        created.append(c)
        time.sleep(0.01)
        return c

    monkeypatch.setattr(cache_module, "_default_place_cache", None)
    monkeypatch.setattr(cache_module, "PlaceCache", slow_cache)
    seen = []

    def worker():
        start.wait()
        seen.append(get_default_place_cache())

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(created) == 1
    assert all(c is created[0] for c in seen)
    assert len(seen) == 6
