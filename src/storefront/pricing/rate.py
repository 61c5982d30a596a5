"""Commodity Rate Store: an append-only log of silver prices per gram.

The current rate is the most recently captured record. When the log is empty
a seed record is written on first read, so pricing never has to handle a
missing rate. Records are never updated or deleted.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.pricing.engine import to_decimal

DEFAULT_HISTORY_LIMIT = 30


class RateSource(Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"


@storefront.event(part_of="CommodityRate")
class CommodityRateRecorded:
    """A new silver rate was appended to the rate log."""

    __version__ = 1

    rate_id = Identifier(required=True)
    price_per_gram = Float(required=True)
    currency = String(required=True)
    source = String(required=True)
    captured_at = DateTime(required=True)


@storefront.aggregate
class CommodityRate:
    price_per_gram = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="INR")
    source = String(choices=RateSource, default=RateSource.MANUAL.value)
    captured_at = DateTime(required=True)

    @classmethod
    def record(cls, price_per_gram, source=RateSource.MANUAL.value, currency=None, captured_at=None):
        """Create a new rate record. Non-positive prices are rejected."""
        amount = to_decimal(price_per_gram, "price_per_gram")
        if amount <= 0:
            raise ValidationError({"price_per_gram": ["Rate per gram must be greater than zero"]})

        rate = cls(
            price_per_gram=float(amount),
            currency=currency or get_settings().currency,
            source=source,
            captured_at=captured_at or datetime.now(UTC),
        )
        rate.raise_(
            CommodityRateRecorded(
                rate_id=str(rate.id),
                price_per_gram=rate.price_per_gram,
                currency=rate.currency,
                source=rate.source,
                captured_at=rate.captured_at,
            )
        )
        return rate


@storefront.repository(part_of=CommodityRate)
class CommodityRateRepository:
    """Read side of the rate log, newest record first."""

    def latest(self) -> CommodityRate:
        """Return the current rate, seeding the default rate if the log is empty."""
        records = self._dao.query.order_by("-captured_at").limit(1).all().items
        if records:
            return records[0]

        seed = CommodityRate.record(
            price_per_gram=get_settings().default_rate_per_gram,
            source=RateSource.MANUAL.value,
        )
        self.add(seed)
        return seed

    def history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CommodityRate]:
        """Return the most recent rates, newest first."""
        return self._dao.query.order_by("-captured_at").limit(limit).all().items
