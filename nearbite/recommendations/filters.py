from __future__ import annotations

from typing import Collection

import pandas as pd

from .models import BusinessStatus, PlaceRecord, PriceTier

# Places that report no price level are matched as mid-range.
UNSPECIFIED_PRICE_TIER = PriceTier.moderate


def _frame(places: list[PlaceRecord]) -> pd.DataFrame:
    return pd.DataFrame({
        "business_status": [p.business_status.value for p in places],
        "rating": pd.Series([p.rating for p in places], dtype="float64"),
        "price_bucket": [(p.price_level or UNSPECIFIED_PRICE_TIER).value for p in places],
    })


def filter_places(
    places: list[PlaceRecord],
    budgets: Collection[PriceTier | str],
    min_rating: float,
) -> list[PlaceRecord]:
    """Drop closed places and places outside the budget or below the rating floor.

    Only removes; surviving places keep their provider order.
    """
    if not places:
        return []

    df = _frame(places)

    mask = df["business_status"] == BusinessStatus.operational.value
    mask = mask & (df["rating"].fillna(0.0) >= min_rating)

    if budgets:
        wanted = [PriceTier(b).value for b in budgets]
        mask = mask & df["price_bucket"].isin(wanted)

    return [places[i] for i in df.index[mask.to_numpy()]]
