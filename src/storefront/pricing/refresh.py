"""Rate refresh from the external provider: command and handler.

Invoked by the scheduler (``manage.py refresh-rate``) with source
``automatic``, or by an admin with source ``manual``.
"""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import ExternalDependencyError
from storefront.pricing.provider import get_rate_provider
from storefront.pricing.provider.port import RateProviderError
from storefront.pricing.rate import CommodityRate, RateSource

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CommodityRate")
class RefreshCommodityRate:
    source = String(choices=RateSource, default=RateSource.AUTOMATIC.value)


@storefront.command_handler(part_of=CommodityRate)
class RefreshCommodityRateHandler:
    @handle(RefreshCommodityRate)
    def refresh_rate(self, command):
        provider = get_rate_provider()
        try:
            price_per_gram = provider.fetch_rate_per_gram()
        except RateProviderError as exc:
            logger.error("commodity_rate_refresh_failed", provider=type(provider).__name__, error=str(exc))
            raise ExternalDependencyError("rate_provider_unavailable", str(exc)) from exc

        rate = CommodityRate.record(
            price_per_gram=price_per_gram,
            source=command.source or RateSource.AUTOMATIC.value,
        )
        current_domain.repository_for(CommodityRate).add(rate)

        logger.info(
            "commodity_rate_refreshed",
            rate_id=str(rate.id),
            price_per_gram=rate.price_per_gram,
            provider=type(provider).__name__,
        )
        return str(rate.id)
