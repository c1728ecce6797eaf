from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PriceTier(str, Enum):
    inexpensive = "$"
    moderate = "$$"
    expensive = "$$$"
    very_expensive = "$$$$"


class BusinessStatus(str, Enum):
    operational = "OPERATIONAL"
    closed_temporarily = "CLOSED_TEMPORARILY"
    closed_permanently = "CLOSED_PERMANENTLY"
    unspecified = "BUSINESS_STATUS_UNSPECIFIED"


class Location(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class Preferences(BaseModel):
    cuisines: list[str] = Field(default_factory=list)
    budget: list[PriceTier] = Field(
        default_factory=list,
        description='Price tiers to include, e.g. ["$", "$$"]; empty means any',
    )
    distance: int | None = Field(
        default=None, ge=0, le=50000, description="Search radius in metres; 0 means the default",
    )
    min_rating: float | None = Field(default=None, ge=0.0, le=5.0)


class PickRequest(BaseModel):
    preferences: Preferences | None = None
    location: Location | None = None


class PlaceLinks(BaseModel):
    model_config = ConfigDict(frozen=True)

    directions_uri: str | None = None
    reviews_uri: str | None = None
    photos_uri: str | None = None


class PlaceRecord(BaseModel):
    """A single nearby-search result as returned by the provider."""

    model_config = ConfigDict(frozen=True)

    name: str = "Unknown"
    address: str | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    user_rating_count: int = 0
    business_status: BusinessStatus = BusinessStatus.unspecified
    price_level: PriceTier | None = None
    types: tuple[str, ...] = ()
    location: Location
    photos: tuple[dict[str, Any], ...] = ()
    links: PlaceLinks = Field(default_factory=PlaceLinks)
    website_uri: str | None = None
    phone: str | None = None


class RestaurantOut(BaseModel):
    name: str
    address: str
    rating: float | str
    user_rating_count: int
    location: Location
    types: list[str]
    photos: list[dict[str, Any]]
    price_level: str
    directions_link: str | None = None
    reviews_link: str | None = None
    photos_link: str | None = None
    website: str | None = None
    phone: str | None = None

    @classmethod
    def from_place(cls, place: PlaceRecord) -> "RestaurantOut":
        return cls(
            name=place.name,
            address=place.address or "No address provided",
            rating=place.rating if place.rating is not None else "N/A",
            user_rating_count=place.user_rating_count,
            location=place.location,
            types=list(place.types),
            photos=list(place.photos),
            price_level=place.price_level.value if place.price_level else "N/A",
            directions_link=place.links.directions_uri,
            reviews_link=place.links.reviews_uri,
            photos_link=place.links.photos_uri,
            website=place.website_uri,
            phone=place.phone,
        )


class RecommendationResponse(BaseModel):
    restaurants: list[RestaurantOut]


# ── Cache keys ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoCell:
    lat: float
    lng: float


@dataclass(frozen=True)
class SearchQuery:
    cell: GeoCell
    radius_m: int
    types: tuple[str, ...]


@dataclass(frozen=True)
class CacheEntry:
    query: SearchQuery
    places: list[PlaceRecord]
    cached_at: datetime
