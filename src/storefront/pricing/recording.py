"""Manual rate recording: command and handler."""

import structlog
from protean import handle
from protean.fields import Float, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.pricing.rate import CommodityRate, RateSource

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CommodityRate")
class RecordCommodityRate:
    """Append a silver rate to the rate log."""

    price_per_gram = Float(required=True)
    source = String(choices=RateSource, default=RateSource.MANUAL.value)


@storefront.command_handler(part_of=CommodityRate)
class RecordCommodityRateHandler:
    @handle(RecordCommodityRate)
    def record_rate(self, command):
        rate = CommodityRate.record(
            price_per_gram=command.price_per_gram,
            source=command.source or RateSource.MANUAL.value,
        )
        current_domain.repository_for(CommodityRate).add(rate)

        logger.info(
            "commodity_rate_recorded",
            rate_id=str(rate.id),
            price_per_gram=rate.price_per_gram,
            source=rate.source,
        )
        return str(rate.id)
