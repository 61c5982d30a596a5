"""Coupon validation and redemption.

``validate_coupon`` is a pure check used before checkout and never touches
the usage counter. ``redeem_coupon`` runs inside order placement and counts
the use in the same unit of work that creates the order.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from storefront.coupon.coupon import INVALID_OR_EXPIRED, Coupon, normalize_code
from storefront.errors import CouponRejected

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CouponQuote:
    code: str
    discount: float
    discount_type: str
    discount_value: float


def _quote(code: str, subtotal, now: datetime | None) -> tuple[Coupon, CouponQuote]:
    coupon = current_domain.repository_for(Coupon).find_by_code(code)
    if coupon is None:
        raise CouponRejected(INVALID_OR_EXPIRED, "Invalid or expired coupon code")

    discount = coupon.discount_for(subtotal, now or datetime.now(UTC))
    return coupon, CouponQuote(
        code=coupon.code,
        discount=float(discount),
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
    )


def validate_coupon(code: str, subtotal, now: datetime | None = None) -> CouponQuote:
    """Quote the discount ``code`` grants on ``subtotal`` or raise CouponRejected."""
    _, quote = _quote(code, subtotal, now)
    return quote


def redeem_coupon(code: str, subtotal, order_id: str | None = None, now: datetime | None = None) -> CouponQuote:
    """Quote the discount and count one use of the coupon."""
    coupon, quote = _quote(code, subtotal, now)

    expected_used_count = coupon.used_count or 0
    coupon.record_usage(order_id=order_id)
    current_domain.repository_for(Coupon).commit_usage(coupon, expected_used_count)

    logger.info("coupon_redeemed", code=normalize_code(code), order_id=order_id, used_count=coupon.used_count)
    return quote
