from __future__ import annotations

import logging
import random
import time

from ..analytics.store import record_event
from ..auth.context import ANONYMOUS, Authenticated, UserContext
from ..history.store import get_visit_count, get_visited_names
from ..places.client import PlacesClient, get_default_places_client
from .cache import PlaceCache, get_default_place_cache
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .defaults import select_default_types
from .errors import InvalidInput
from .filters import filter_places
from .geo import to_cell
from .models import (
    Location,
    PlaceRecord,
    Preferences,
    RecommendationResponse,
    RestaurantOut,
    SearchQuery,
)
from .ranking import rank_places
from .sampling import sample_top

logger = logging.getLogger(__name__)


def _fetch_places(
    query: SearchQuery,
    location: Location,
    cache: PlaceCache,
    provider: PlacesClient,
) -> tuple[list[PlaceRecord], bool]:
    """Return ``(places, cache_hit)``; provider failures propagate."""
    entry = cache.lookup(query)
    if entry is not None:
        logger.info("Using cached result from %s", entry.cached_at.isoformat())
        return entry.places, True

    logger.info("Fetching from places provider for types %s", list(query.types))
    places = provider.search(location, query.radius_m, query.types)
    if places:
        cache.store(query, places)
        logger.info("Cached %d results.", len(places))
    else:
        logger.info("No results from provider, nothing to cache.")
    return places, False


def recommend(
    preferences: Preferences | None,
    location: Location | None,
    user: UserContext = ANONYMOUS,
    *,
    cache: PlaceCache | None = None,
    provider: PlacesClient | None = None,
    rng: random.Random | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> RecommendationResponse:
    """
    Pick up to ``config.pick`` nearby restaurants for *user*.

    An empty ``restaurants`` list means nothing matched. Raises
    ``InvalidInput`` when preferences or location are missing and
    ``ProviderUnavailable`` when the nearby search cannot be performed.
    """
    if preferences is None or location is None:
        raise InvalidInput("Preferences and location required")

    start_time = time.time()
    rng = rng or random.Random()
    cache = cache or get_default_place_cache()
    provider = provider or get_default_places_client()

    radius = preferences.distance or config.default_radius_m
    min_rating = (
        preferences.min_rating if preferences.min_rating is not None else config.default_min_rating
    )

    try:
        visited_names = get_visited_names(user)
        visit_count = get_visit_count(user)
    except Exception:
        logger.warning("Could not load visit history for %s, ranking without it", user, exc_info=True)
        visited_names, visit_count = set(), 0
    logger.debug("User %s has %d visits, %d distinct places", user, visit_count, len(visited_names))

    types = select_default_types(preferences.cuisines, min_rating, radius, visit_count, rng)
    query = SearchQuery(
        cell=to_cell(location.lat, location.lng, config.coord_precision),
        radius_m=radius,
        types=tuple(types),
    )

    places, cache_hit = _fetch_places(query, location, cache, provider)

    filtered = filter_places(places, preferences.budget, min_rating)
    ranked = rank_places(filtered, visited_names, preferences.cuisines)
    picked = sample_top(ranked, rng, top_n=config.top_n, pick=config.pick)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("search", {
        "types": list(types),
        "explicit_cuisines": bool(preferences.cuisines),
        "budget": [b.value for b in preferences.budget],
        "min_rating": min_rating,
        "radius_m": radius,
        "authenticated": isinstance(user, Authenticated),
        "total_places": len(places),
        "total_candidates": len(filtered),
        "results_returned": len(picked),
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })

    return RecommendationResponse(restaurants=[RestaurantOut.from_place(p) for p in picked])
