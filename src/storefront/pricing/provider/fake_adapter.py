"""Configurable fake rate provider for development and testing."""

from storefront.pricing.provider.port import RateProvider, RateProviderError


class FakeRateProvider(RateProvider):
    """Returns a fixed quote, or fails on demand."""

    def __init__(self, rate_per_gram: float = 152.0) -> None:
        self.rate_per_gram = rate_per_gram
        self.should_succeed = True
        self.failure_reason = "Rate provider unavailable"
        self.calls = 0

    def configure(
        self,
        rate_per_gram: float | None = None,
        should_succeed: bool = True,
        failure_reason: str = "Rate provider unavailable",
    ) -> None:
        if rate_per_gram is not None:
            self.rate_per_gram = rate_per_gram
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def fetch_rate_per_gram(self) -> float:
        self.calls += 1
        if not self.should_succeed:
            raise RateProviderError(self.failure_reason)
        return self.rate_per_gram
