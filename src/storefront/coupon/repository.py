"""Repository for the Coupon aggregate, including the guarded usage write."""

from datetime import datetime

from storefront.coupon.coupon import Coupon, normalize_code
from storefront.domain import storefront
from storefront.errors import Conflict


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code: str) -> Coupon | None:
        results = self._dao.query.filter(code=normalize_code(code)).all().items
        return results[0] if results else None

    def newest_first(self) -> list[Coupon]:
        return self._dao.query.order_by("-created_at").all().items

    def live(self, now: datetime) -> list[Coupon]:
        """Active coupons that have not expired yet."""
        active = self._dao.query.filter(is_active=True).order_by("-created_at").all().items
        return [coupon for coupon in active if coupon.is_live(now)]

    def commit_usage(self, coupon: Coupon, expected_used_count: int) -> None:
        """Persist a usage increment only if nobody else counted a use in between."""
        unchanged = self._dao.query.filter(id=coupon.id, used_count=expected_used_count).all().items
        if not unchanged:
            raise Conflict("coupon_usage_conflict", f"Coupon {coupon.code} was used concurrently, please retry")
        self.add(coupon)

    def delete_coupon(self, coupon: Coupon) -> None:
        self._dao.delete(coupon)
