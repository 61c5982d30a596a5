"""Coupon administration: commands and handler."""

from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon, DiscountType, normalize_code
from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.utils.lookup import load

_UPDATABLE = (
    "discount_type",
    "discount_value",
    "min_order_amount",
    "max_discount",
    "expires_at",
    "usage_limit",
    "description",
    "is_active",
)


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount = Float(min_value=0.0)
    expires_at = DateTime(required=True)
    usage_limit = Integer(min_value=1)
    description = Text()


@storefront.command(part_of="Coupon")
class UpdateCoupon:
    coupon_id = Identifier(required=True)
    discount_type = String(choices=DiscountType)
    discount_value = Float(min_value=0.0)
    min_order_amount = Float(min_value=0.0)
    max_discount = Float(min_value=0.0)
    expires_at = DateTime()
    usage_limit = Integer(min_value=1)
    description = Text()
    is_active = Boolean()


@storefront.command(part_of="Coupon")
class ToggleCoupon:
    coupon_id = Identifier(required=True)


@storefront.command(part_of="Coupon")
class DeleteCoupon:
    coupon_id = Identifier(required=True)


@storefront.command_handler(part_of=Coupon)
class ManageCouponsHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        if repo.find_by_code(command.code):
            raise Conflict("duplicate_coupon_code", f"Coupon code {normalize_code(command.code)} already exists")

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            expires_at=command.expires_at,
            min_order_amount=command.min_order_amount,
            max_discount=command.max_discount,
            usage_limit=command.usage_limit,
            description=command.description,
        )
        repo.add(coupon)
        return str(coupon.id)

    @handle(UpdateCoupon)
    def update_coupon(self, command):
        coupon = load(Coupon, command.coupon_id)
        coupon.update(**{name: getattr(command, name) for name in _UPDATABLE if getattr(command, name) is not None})
        current_domain.repository_for(Coupon).add(coupon)

    @handle(ToggleCoupon)
    def toggle_coupon(self, command):
        coupon = load(Coupon, command.coupon_id)
        is_active = coupon.toggle()
        current_domain.repository_for(Coupon).add(coupon)
        return is_active

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        coupon = load(Coupon, command.coupon_id)
        current_domain.repository_for(Coupon).delete_coupon(coupon)
