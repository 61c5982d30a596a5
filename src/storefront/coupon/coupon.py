"""Coupon aggregate and its discount rules.

Rules are checked in a fixed order and the first failure wins:

1. the coupon is active and not expired
2. the usage limit, when set, has not been reached
3. the order subtotal meets the minimum order amount
4. percentage coupons take ``subtotal * value / 100`` capped by ``max_discount``;
   fixed coupons take ``value``
5. the discount never exceeds the subtotal
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.coupon.events import CouponCreated, CouponRedeemed
from storefront.domain import storefront
from storefront.errors import CouponRejected
from storefront.pricing.engine import round2, to_decimal

INVALID_OR_EXPIRED = "coupon_invalid_or_expired"
USAGE_LIMIT_REACHED = "coupon_usage_limit_reached"
MINIMUM_NOT_MET = "coupon_minimum_not_met"

_UNSET = object()


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def as_utc(moment: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so comparisons never mix the two kinds."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount = Float(min_value=0.0)  # Percentage coupons only
    expires_at = DateTime(required=True)
    is_active = Boolean(default=True)
    usage_limit = Integer(min_value=1)  # None means unlimited
    used_count = Integer(default=0, min_value=0)
    description = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        expires_at,
        min_order_amount=0.0,
        max_discount=None,
        usage_limit=None,
        description=None,
    ):
        if not normalize_code(code):
            raise ValidationError({"code": ["Coupon code is required"]})

        now = datetime.now(UTC)
        coupon = cls(
            code=normalize_code(code),
            discount_type=discount_type,
            discount_value=discount_value,
            min_order_amount=min_order_amount or 0.0,
            max_discount=max_discount,
            expires_at=as_utc(expires_at),
            usage_limit=usage_limit,
            used_count=0,
            description=description or "",
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                expires_at=coupon.expires_at,
            )
        )
        return coupon

    # -------------------------------------------------------------------
    # Discount rules
    # -------------------------------------------------------------------
    def is_live(self, now: datetime) -> bool:
        return bool(self.is_active) and as_utc(self.expires_at) > as_utc(now)

    def usage_exhausted(self) -> bool:
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def discount_for(self, subtotal, now: datetime) -> Decimal:
        """Discount this coupon grants on ``subtotal``, or raise CouponRejected."""
        amount = to_decimal(subtotal, "subtotal")

        if not self.is_live(now):
            raise CouponRejected(INVALID_OR_EXPIRED, "Invalid or expired coupon code")
        if self.usage_exhausted():
            raise CouponRejected(USAGE_LIMIT_REACHED, "Coupon usage limit reached")
        minimum = to_decimal(self.min_order_amount or 0, "min_order_amount")
        if amount < minimum:
            raise CouponRejected(MINIMUM_NOT_MET, f"Minimum order amount of {minimum} required")

        value = to_decimal(self.discount_value, "discount_value")
        if self.discount_type == DiscountType.PERCENTAGE.value:
            discount = amount * value / 100
            if self.max_discount is not None:
                discount = min(discount, to_decimal(self.max_discount, "max_discount"))
        else:
            discount = value

        return round2(min(discount, amount))

    def record_usage(self, order_id: str | None = None) -> None:
        """Count one successful application to a placed order."""
        self.used_count = (self.used_count or 0) + 1
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                order_id=order_id,
                used_count=self.used_count,
                redeemed_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update(
        self,
        discount_type=_UNSET,
        discount_value=_UNSET,
        min_order_amount=_UNSET,
        max_discount=_UNSET,
        expires_at=_UNSET,
        usage_limit=_UNSET,
        description=_UNSET,
        is_active=_UNSET,
    ) -> None:
        changes = {
            "discount_type": discount_type,
            "discount_value": discount_value,
            "min_order_amount": min_order_amount,
            "max_discount": max_discount,
            "expires_at": as_utc(expires_at) if isinstance(expires_at, datetime) else expires_at,
            "usage_limit": usage_limit,
            "description": description,
            "is_active": is_active,
        }
        with atomic_change(self):
            for field_name, value in changes.items():
                if value is not _UNSET:
                    setattr(self, field_name, value)
            self.updated_at = datetime.now(UTC)

    def toggle(self) -> bool:
        self.is_active = not self.is_active
        self.updated_at = datetime.now(UTC)
        return self.is_active
