"""Rate provider factory.

Provides get_rate_provider() / set_rate_provider() to swap implementations:
- FakeRateProvider for development and testing
- GoldApiProvider when STOREFRONT_RATE_PROVIDER=goldapi
"""

from storefront.config import get_settings
from storefront.pricing.provider.fake_adapter import FakeRateProvider
from storefront.pricing.provider.port import RateProvider

_current_provider: RateProvider | None = None


def get_rate_provider() -> RateProvider:
    """Return the current rate provider, building it from settings on first use."""
    global _current_provider
    if _current_provider is None:
        settings = get_settings()
        if settings.rate_provider == "goldapi":
            from storefront.pricing.provider.goldapi_adapter import GoldApiProvider

            _current_provider = GoldApiProvider(
                url=settings.rate_provider_url,
                token=settings.rate_provider_token,
                timeout=settings.rate_timeout_seconds,
            )
        else:
            _current_provider = FakeRateProvider(rate_per_gram=settings.default_rate_per_gram)
    return _current_provider


def set_rate_provider(provider: RateProvider) -> None:
    """Override the active rate provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_rate_provider() -> None:
    """Reset to the configured provider."""
    global _current_provider
    _current_provider = None
