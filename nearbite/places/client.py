from __future__ import annotations

import logging
import threading
from typing import Any, Sequence

import requests

from ..recommendations.errors import ProviderUnavailable
from ..recommendations.models import (
    BusinessStatus,
    Location,
    PlaceLinks,
    PlaceRecord,
    PriceTier,
)
from .config import DEFAULT_PROVIDER_CONFIG, ProviderConfig

logger = logging.getLogger(__name__)

PRICE_LEVELS: dict[str, PriceTier] = {
    "PRICE_LEVEL_INEXPENSIVE": PriceTier.inexpensive,
    "PRICE_LEVEL_MODERATE": PriceTier.moderate,
    "PRICE_LEVEL_EXPENSIVE": PriceTier.expensive,
    "PRICE_LEVEL_VERY_EXPENSIVE": PriceTier.very_expensive,
}


def _business_status(raw: Any) -> BusinessStatus:
    try:
        return BusinessStatus(raw)
    except ValueError:
        return BusinessStatus.unspecified


def parse_place(item: dict[str, Any]) -> PlaceRecord:
    """Convert one nearby-search result into a ``PlaceRecord``.

    Raises ``ValueError`` (or pydantic's ``ValidationError``) when the item has
    no usable location.
    """
    loc = item.get("location") or {}
    links = item.get("googleMapsLinks") or {}
    return PlaceRecord(
        name=(item.get("displayName") or {}).get("text") or "Unknown",
        address=item.get("formattedAddress"),
        rating=item.get("rating"),
        user_rating_count=item.get("userRatingCount") or 0,
        business_status=_business_status(item.get("businessStatus")),
        price_level=PRICE_LEVELS.get(item.get("priceLevel", "")),
        types=tuple(item.get("types") or ()),
        location=Location(lat=loc["latitude"], lng=loc["longitude"]),
        photos=tuple(item.get("photos") or ()),
        links=PlaceLinks(
            directions_uri=links.get("directionsUri"),
            reviews_uri=links.get("reviewsUri"),
            photos_uri=links.get("photosUri"),
        ),
        website_uri=item.get("websiteUri"),
        phone=item.get("nationalPhoneNumber") or item.get("internationalPhoneNumber"),
    )


class PlacesClient:
    def __init__(
        self,
        config: ProviderConfig = DEFAULT_PROVIDER_CONFIG,
        session: requests.Session | None = None,
    ):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session or requests.Session()

    def _post_nearby(self, body: dict[str, Any]) -> requests.Response:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.config.api_key,
            "X-Goog-FieldMask": self.config.field_mask,
        }
        try:
            resp = self.session.post(
                f"{self.base_url}/places:searchNearby",
                json=body,
                headers=headers,
                timeout=self.config.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ProviderUnavailable(f"nearby search failed: {exc}") from exc
        return resp

    def search(self, location: Location, radius_m: int, types: Sequence[str]) -> list[PlaceRecord]:
        """
        Run one nearby search around *location*.

        Returns an empty list when the provider answers with no places or with
        a payload that cannot be understood. Raises ``ProviderUnavailable``
        when the call itself fails (missing key, transport error, timeout,
        non-2xx status).
        """
        if not self.config.api_key:
            raise ProviderUnavailable("GOOGLE_API_KEY is not configured")

        body = {
            "includedTypes": list(types),
            "maxResultCount": self.config.max_result_count,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": location.lat, "longitude": location.lng},
                    "radius": radius_m,
                }
            },
            "rankPreference": self.config.rank_preference,
        }
        logger.debug("Nearby search request: %s", body)
        resp = self._post_nearby(body)

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Nearby search returned a non-JSON body, treating as no results")
            return []
        raw_places = data.get("places") if isinstance(data, dict) else None
        if not isinstance(raw_places, list):
            if raw_places is not None:
                logger.warning("Nearby search payload has malformed 'places', treating as no results")
            return []

        places: list[PlaceRecord] = []
        for item in raw_places:
            try:
                places.append(parse_place(item))
            except (AttributeError, KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed place in nearby search payload", exc_info=True)
                continue
        logger.info("Nearby search returned %d places for types %s", len(places), list(types))
        return places


_default_places_client: PlacesClient | None = None
_default_places_client_lock = threading.Lock()


def get_default_places_client() -> PlacesClient:
    global _default_places_client
    with _default_places_client_lock:
        if _default_places_client is None:
            _default_places_client = PlacesClient()
    return _default_places_client
