from __future__ import annotations

from collections import Counter
from typing import Any


def _rate(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Most requested place types (explicit and defaulted)
    type_counter: Counter[str] = Counter()
    for s in searches:
        for t in s.get("types", []) or []:
            type_counter[t] += 1
    top_types = [{"name": n, "count": c} for n, c in type_counter.most_common(10)]

    # Budget tier usage
    budget_counter: Counter[str] = Counter()
    for s in searches:
        for b in s.get("budget", []) or []:
            budget_counter[b] += 1

    explicit = sum(1 for s in searches if s.get("explicit_cuisines"))
    authenticated = sum(1 for s in searches if s.get("authenticated"))
    empty = sum(1 for s in searches if s.get("results_returned", 0) == 0)
    cache_hits = sum(1 for s in searches if s.get("cache_hit"))

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_types": top_types,
        "budget_usage": dict(budget_counter),
        "explicit_cuisine_rate": _rate(explicit, total),
        "authenticated_rate": _rate(authenticated, total),
        "no_results_rate": _rate(empty, total),
        "cache_stats": {
            "hits": cache_hits,
            "misses": total - cache_hits,
            "hit_rate": _rate(cache_hits, total),
        },
    }
