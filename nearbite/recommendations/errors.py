from __future__ import annotations


class RecommendationError(Exception):
    """Base class for failures surfaced by the recommendation pipeline."""


class InvalidInput(RecommendationError):
    """Preferences or location were missing from the request."""


class ProviderUnavailable(RecommendationError):
    """The nearby-search provider could not be reached or answered with an error.

    Distinct from a provider that answered successfully with zero places,
    which is a normal empty result.
    """


class CacheUnavailable(RecommendationError):
    """The place cache could not be read or written."""
