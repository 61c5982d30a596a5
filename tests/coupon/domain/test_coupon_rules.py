"""Coupon discount rules, checked in order with the first failure winning."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from storefront.coupon.coupon import (
    INVALID_OR_EXPIRED,
    MINIMUM_NOT_MET,
    USAGE_LIMIT_REACHED,
    Coupon,
)
from storefront.coupon.events import CouponCreated, CouponRedeemed
from storefront.errors import CouponRejected

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)


def _coupon(**overrides):
    fields = {
        "code": "festive",
        "discount_type": "percentage",
        "discount_value": 10.0,
        "expires_at": NOW + timedelta(days=7),
    }
    fields.update(overrides)
    return Coupon.create(**fields)


class TestCouponCreation:
    def test_code_is_uppercased(self):
        coupon = _coupon()

        assert coupon.code == "FESTIVE"
        assert coupon.used_count == 0
        assert isinstance(coupon._events[0], CouponCreated)

    def test_percentage_above_hundred_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _coupon(discount_value=150.0)
        assert "discount_value" in exc.value.messages

    def test_fixed_above_hundred_allowed(self):
        assert _coupon(discount_type="fixed", discount_value=2000.0).discount_value == 2000.0

    def test_unknown_discount_type(self):
        with pytest.raises(ValidationError):
            _coupon(discount_type="bogo")

    def test_naive_expiry_treated_as_utc(self):
        coupon = _coupon(expires_at=datetime(2026, 10, 8))
        assert coupon.discount_for(1000, NOW) == 100


class TestDiscountAmounts:
    def test_percentage(self):
        assert float(_coupon().discount_for(1234.5, NOW)) == 123.45

    def test_percentage_clamped_to_max_discount(self):
        coupon = _coupon(discount_value=50.0, max_discount=100.0)
        assert coupon.discount_for(1000, NOW) == 100

    def test_fixed(self):
        assert _coupon(discount_type="fixed", discount_value=250.0).discount_for(1000, NOW) == 250

    def test_fixed_never_exceeds_subtotal(self):
        coupon = _coupon(discount_type="fixed", discount_value=2000.0)
        assert coupon.discount_for(500, NOW) == 500

    def test_rounds_half_up(self):
        # 10% of 100.05 is 10.005
        assert float(_coupon().discount_for(100.05, NOW)) == 10.01


class TestRejections:
    def test_inactive(self):
        coupon = _coupon()
        coupon.toggle()

        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(1000, NOW)
        assert exc.value.reason == INVALID_OR_EXPIRED

    def test_expired(self):
        coupon = _coupon(expires_at=NOW - timedelta(seconds=1))
        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(1000, NOW)
        assert exc.value.reason == INVALID_OR_EXPIRED

    def test_expiry_instant_is_already_expired(self):
        coupon = _coupon(expires_at=NOW)
        with pytest.raises(CouponRejected):
            coupon.discount_for(1000, NOW)

    def test_usage_limit_reached(self):
        coupon = _coupon(usage_limit=1)
        coupon.record_usage()

        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(1000, NOW)
        assert exc.value.reason == USAGE_LIMIT_REACHED

    def test_minimum_not_met(self):
        coupon = _coupon(min_order_amount=1000.0)

        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(999.99, NOW)
        assert exc.value.reason == MINIMUM_NOT_MET
        assert coupon.discount_for(1000, NOW) == 100

    def test_expiry_checked_before_usage_limit(self):
        coupon = _coupon(usage_limit=1, expires_at=NOW - timedelta(days=1))
        coupon.record_usage()

        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(1000, NOW)
        assert exc.value.reason == INVALID_OR_EXPIRED

    def test_usage_limit_checked_before_minimum(self):
        coupon = _coupon(usage_limit=1, min_order_amount=5000.0)
        coupon.record_usage()

        with pytest.raises(CouponRejected) as exc:
            coupon.discount_for(1000, NOW)
        assert exc.value.reason == USAGE_LIMIT_REACHED


class TestUsageAndAdministration:
    def test_record_usage_raises_event(self):
        coupon = _coupon()
        coupon._events.clear()

        coupon.record_usage(order_id="order-1")

        assert coupon.used_count == 1
        event = coupon._events[0]
        assert isinstance(event, CouponRedeemed)
        assert event.order_id == "order-1"

    def test_update_changes_only_given_fields(self):
        coupon = _coupon(min_order_amount=500.0)
        coupon.update(discount_value=20.0)

        assert coupon.discount_value == 20.0
        assert coupon.min_order_amount == 500.0

    def test_update_cannot_break_percentage_cap(self):
        coupon = _coupon()
        with pytest.raises(ValidationError):
            coupon.update(discount_value=120.0)

    def test_toggle(self):
        coupon = _coupon()
        assert coupon.toggle() is False
        assert coupon.toggle() is True
