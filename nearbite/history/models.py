from __future__ import annotations

from pydantic import BaseModel, Field


class VisitRequest(BaseModel):
    restaurant_name: str = Field(..., min_length=1)
    restaurant_types: list[str] = Field(default_factory=list)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class VisitResponse(BaseModel):
    status: str
    total_visits: int


class VisitLocation(BaseModel):
    latitude: float
    longitude: float
    weight: int = 1
