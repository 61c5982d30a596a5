"""Storefront bounded context: catalogue pricing, carts, coupons, orders and payments.

A single Protean domain composes every aggregate of the shop. Product prices
are indexed on the live silver rate, orders freeze their prices at placement,
and payments are confirmed only after server-side verification.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
