from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

FIELD_MASK = ",".join([
    "places.displayName",
    "places.location",
    "places.businessStatus",
    "places.rating",
    "places.userRatingCount",
    "places.websiteUri",
    "places.googleMapsLinks",
    "places.formattedAddress",
    "places.priceLevel",
    "places.types",
    "places.photos",
    "places.nationalPhoneNumber",
    "places.internationalPhoneNumber",
])


@dataclass(frozen=True)
class ProviderConfig:
    api_key: str = os.getenv("GOOGLE_API_KEY", "")
    base_url: str = os.getenv("PLACES_BASE_URL", "https://places.googleapis.com/v1")
    timeout: float = float(os.getenv("PLACES_TIMEOUT", "10.0"))
    max_result_count: int = 20
    rank_preference: str = "POPULARITY"
    field_mask: str = FIELD_MASK


DEFAULT_PROVIDER_CONFIG = ProviderConfig()
