"""
Nearby-search provider integration.

Responsibilities:
- Hold the provider endpoint, credentials and request defaults.
- Call the Places nearby-search API once per cache miss.
- Normalise provider payloads into ``PlaceRecord`` objects.
- Report transport failures separately from empty result sets.
"""
