"""
Substitute place types for searches where the user named no cuisine.

The choice is a variety heuristic, not personalisation: strict searches
(very high rating floor or the tightest radius) stay generic, moderately
frequent users get one of a few broad cuisine bundles, and everyone else gets
a random pairing of one cuisine-half type and one food-style-half type.
"""
from __future__ import annotations

import random
from typing import Sequence

GENERIC_TYPE = "restaurant"

TYPE_CATALOG: tuple[str, ...] = (
    "afghani_restaurant", "african_restaurant", "american_restaurant", "brazilian_restaurant",
    "chinese_restaurant", "french_restaurant", "greek_restaurant", "indian_restaurant",
    "indonesian_restaurant", "italian_restaurant", "japanese_restaurant", "korean_restaurant",
    "lebanese_restaurant", "mediterranean_restaurant", "mexican_restaurant",
    "middle_eastern_restaurant", "spanish_restaurant", "thai_restaurant", "turkish_restaurant",
    "vietnamese_restaurant", "bagel_shop", "bakery", "barbecue_restaurant",
    "breakfast_restaurant", "brunch_restaurant", "buffet_restaurant", "cafe", "confectionery",
    "deli", "dessert_shop", "diner", "donut_shop", "fast_food_restaurant",
    "fine_dining_restaurant", "food_court", "hamburger_restaurant", "ice_cream_shop",
    "juice_shop", "pizza_restaurant", "ramen_restaurant", "sandwich_shop",
    "seafood_restaurant", "steak_house", "sushi_restaurant", "vegan_restaurant",
    "vegetarian_restaurant",
)

# Even 23/23 split, so breakfast_restaurant opens the food-style half.
_HALF = len(TYPE_CATALOG) // 2
CUISINE_HALF = TYPE_CATALOG[:_HALF]
FOOD_STYLE_HALF = TYPE_CATALOG[_HALF:]

DIVERSE_SETS: tuple[tuple[str, ...], ...] = (
    ("italian_restaurant", "chinese_restaurant", "mexican_restaurant", "indian_restaurant"),
    ("japanese_restaurant", "french_restaurant", "thai_restaurant", "mediterranean_restaurant"),
    ("american_restaurant", "vietnamese_restaurant", "greek_restaurant", "korean_restaurant"),
)

STRICT_MIN_RATING = 4.7
TIGHTEST_RADIUS_M = 500
DIVERSE_VISIT_RANGE = (5, 20)  # exclusive bounds


def select_default_types(
    explicit_cuisines: Sequence[str],
    min_rating: float,
    distance_m: int,
    visit_count: int,
    rng: random.Random,
) -> list[str]:
    """Return the types to search for; explicit cuisines always win."""
    if explicit_cuisines:
        return list(explicit_cuisines)

    if min_rating > STRICT_MIN_RATING or distance_m == TIGHTEST_RADIUS_M:
        return [GENERIC_TYPE]

    low, high = DIVERSE_VISIT_RANGE
    if low < visit_count < high:
        return list(rng.choice(DIVERSE_SETS))

    return [rng.choice(CUISINE_HALF), rng.choice(FOOD_STYLE_HALF)]
