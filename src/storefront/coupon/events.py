"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponCreated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    expires_at = DateTime(required=True)


@storefront.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was applied to a placed order."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    order_id = Identifier()
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)
