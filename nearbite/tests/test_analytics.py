from collections import deque

from nearbite.analytics import store
from nearbite.analytics.aggregator import compute_analytics
from nearbite.analytics.store import MAX_EVENTS, get_events, record_event


def _search(**data):
    base = {
        "types": ["restaurant"],
        "explicit_cuisines": False,
        "budget": [],
        "authenticated": False,
        "results_returned": 2,
        "response_time_ms": 10.0,
        "cache_hit": False,
    }
    base.update(data)
    return base


def test_analytics_empty():
    body = compute_analytics([])
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["cache_stats"]["hit_rate"] == 0.0


def test_analytics_aggregates_searches():
    record_event("search", _search(types=["thai_restaurant", "cafe"], budget=["$"], cache_hit=True))
    record_event("search", _search(types=["thai_restaurant"], explicit_cuisines=True, response_time_ms=30.0))
    record_event("search", _search(budget=["$", "$$"], authenticated=True, results_returned=0))
    record_event("other", {"response_time_ms": 999.0})

    body = compute_analytics(get_events())

    assert body["total_searches"] == 3
    assert body["avg_response_time_ms"] == 16.7
    assert body["top_types"][0] == {"name": "thai_restaurant", "count": 2}
    assert body["budget_usage"] == {"$": 2, "$$": 1}
    assert body["explicit_cuisine_rate"] == 33.3
    assert body["authenticated_rate"] == 33.3
    assert body["no_results_rate"] == 33.3
    assert body["cache_stats"] == {"hits": 1, "misses": 2, "hit_rate": 33.3}


def test_event_log_keeps_only_the_newest_events(monkeypatch):
    monkeypatch.setattr(store, "_events", deque(maxlen=3))

    for i in range(5):
        record_event("search", _search(results_returned=i))

    assert [e["results_returned"] for e in get_events()] == [2, 3, 4]


def test_event_log_is_bounded_by_default():
    assert store._events.maxlen == MAX_EVENTS
