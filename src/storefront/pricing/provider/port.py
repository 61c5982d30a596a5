"""Rate provider port (abstract interface).

A rate provider quotes the current silver price in rupees per gram. Adapters
raise RateProviderError for any transport or payload problem so callers can
map it to a single retryable failure.
"""

from abc import ABC, abstractmethod

TROY_OUNCE_GRAMS = 31.1035


class RateProviderError(Exception):
    """The provider could not be reached or returned an unusable quote."""


class RateProvider(ABC):
    """Abstract commodity rate provider."""

    @abstractmethod
    def fetch_rate_per_gram(self) -> float:
        """Return the current silver price per gram, rounded to 2 decimals."""
        ...
