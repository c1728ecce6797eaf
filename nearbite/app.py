from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.context import Authenticated, UserContext
from .auth.dependencies import get_user_context, require_admin, require_user
from .history.models import VisitLocation, VisitRequest, VisitResponse
from .history.store import get_visit_count, get_visit_locations, record_visit
from .recommendations.cache import get_cache_stats
from .recommendations.errors import InvalidInput, ProviderUnavailable
from .recommendations.models import PickRequest, RecommendationResponse
from .recommendations.retrieval import recommend

logger = logging.getLogger(__name__)

app = FastAPI(title="Nearby Restaurant Picker API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "nearbite-secret-change-in-production"),
)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/pick", response_model=RecommendationResponse)
def pick(
    body: PickRequest,
    user: UserContext = Depends(get_user_context),
) -> RecommendationResponse:
    try:
        response = recommend(body.preferences, body.location, user)
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ProviderUnavailable:
        logger.warning("Places provider unavailable while picking", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to pick a restaurant.")

    if not response.restaurants:
        raise HTTPException(status_code=404, detail="No matching restaurants found nearby")
    return response


# ── User endpoints ───────────────────────────────────────────────────────


@app.post("/history/add", response_model=VisitResponse, status_code=201)
def add_history(
    body: VisitRequest,
    user: Authenticated = Depends(require_user),
) -> VisitResponse:
    record_visit(
        user.user_id,
        body.restaurant_name,
        body.latitude,
        body.longitude,
        body.restaurant_types,
    )
    logger.info("Visit added for user %s to %r", user.user_id, body.restaurant_name)
    return VisitResponse(status="recorded", total_visits=get_visit_count(user))


@app.get("/history/get", response_model=list[VisitLocation])
def get_history(user: Authenticated = Depends(require_user)) -> list[VisitLocation]:
    return [VisitLocation(**loc) for loc in get_visit_locations(user)]


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
