from __future__ import annotations

from .models import GeoCell


def quantize(coord: float, precision: float = 0.001) -> float:
    """Snap a coordinate onto a fixed grid so nearby searches share a cache key.

    Uses Python's ``round``, so exact midpoints go to the even grid line.
    """
    return round(coord / precision) * precision


def to_cell(lat: float, lng: float, precision: float = 0.001) -> GeoCell:
    return GeoCell(lat=quantize(lat, precision), lng=quantize(lng, precision))
