"""
Nearby restaurant picker.

Responsibilities:
- Bucket the caller's position into a grid cell and reuse cached searches.
- Choose search types when the user names no cuisine.
- Filter out closed, over-budget and under-rated places.
- Rank unvisited and better-matching places first.
- Sample the final picks from the top of the ranking for variety.
"""
