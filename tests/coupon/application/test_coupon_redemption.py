"""Coupon validation versus redemption, and the guarded usage write."""

import pytest
from protean import current_domain

from storefront.coupon.coupon import INVALID_OR_EXPIRED, USAGE_LIMIT_REACHED, Coupon
from storefront.coupon.validation import redeem_coupon, validate_coupon
from storefront.errors import Conflict, CouponRejected


def _stored(code="SAVE10"):
    return current_domain.repository_for(Coupon).find_by_code(code)


class TestValidateCoupon:
    def test_quotes_discount(self, make_coupon):
        make_coupon()

        quote = validate_coupon(" save10 ", 2000)

        assert quote.code == "SAVE10"
        assert quote.discount == 200.0
        assert quote.discount_type == "percentage"

    def test_never_counts_usage(self, make_coupon):
        make_coupon(usage_limit=1)

        for _ in range(3):
            validate_coupon("SAVE10", 2000)

        assert _stored().used_count == 0

    def test_unknown_code(self):
        with pytest.raises(CouponRejected) as exc:
            validate_coupon("NOPE", 1000)
        assert exc.value.reason == INVALID_OR_EXPIRED


class TestRedeemCoupon:
    def test_counts_one_use(self, make_coupon):
        make_coupon()

        quote = redeem_coupon("SAVE10", 1000, order_id="order-1")

        assert quote.discount == 100.0
        assert _stored().used_count == 1

    def test_limit_enforced_across_redemptions(self, make_coupon):
        make_coupon(usage_limit=2)
        redeem_coupon("SAVE10", 1000)
        redeem_coupon("SAVE10", 1000)

        with pytest.raises(CouponRejected) as exc:
            redeem_coupon("SAVE10", 1000)

        assert exc.value.reason == USAGE_LIMIT_REACHED
        assert _stored().used_count == 2

    def test_rejected_redemption_does_not_count(self, make_coupon):
        make_coupon(min_order_amount=5000.0)

        with pytest.raises(CouponRejected):
            redeem_coupon("SAVE10", 1000)

        assert _stored().used_count == 0


class TestCommitUsage:
    def test_stale_copy_loses(self, make_coupon):
        coupon = make_coupon()
        repo = current_domain.repository_for(Coupon)
        first = repo.get(coupon.id)
        second = repo.get(coupon.id)

        first.record_usage()
        repo.commit_usage(first, expected_used_count=0)

        second.record_usage()
        with pytest.raises(Conflict) as exc:
            repo.commit_usage(second, expected_used_count=0)

        assert exc.value.reason == "coupon_usage_conflict"
        assert _stored().used_count == 1
