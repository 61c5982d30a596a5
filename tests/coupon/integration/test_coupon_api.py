"""Coupon endpoints over HTTP."""

from datetime import UTC, datetime, timedelta

from protean import current_domain

from storefront.coupon.coupon import Coupon


def _expiry(days=30):
    return (datetime.now(UTC) + timedelta(days=days)).isoformat()


class TestValidateEndpoint:
    def test_quote(self, client, make_coupon):
        make_coupon(discount_value=50.0, max_discount=100.0)

        response = client.post("/coupons/validate", json={"code": "save10", "subtotal": 1000})

        assert response.status_code == 200
        assert response.json()["discount"] == 100.0
        assert current_domain.repository_for(Coupon).find_by_code("SAVE10").used_count == 0

    def test_rejection_reason(self, client, make_coupon):
        make_coupon(min_order_amount=2000.0)

        response = client.post("/coupons/validate", json={"code": "SAVE10", "subtotal": 1000})

        assert response.status_code == 400
        assert response.json()["reason"] == "coupon_minimum_not_met"

    def test_unknown_code(self, client):
        response = client.post("/coupons/validate", json={"code": "NOPE", "subtotal": 1000})
        assert response.json()["reason"] == "coupon_invalid_or_expired"


class TestAdminEndpoints:
    def test_create_toggle_and_list(self, client, admin_headers):
        created = client.post(
            "/coupons",
            json={"code": "diwali", "discount_type": "fixed", "discount_value": 250, "expires_at": _expiry()},
            headers=admin_headers,
        )
        assert created.status_code == 201
        coupon_id = created.json()["coupon_id"]

        assert [coupon["code"] for coupon in client.get("/coupons/active").json()] == ["DIWALI"]

        toggled = client.patch(f"/coupons/{coupon_id}/toggle", headers=admin_headers)
        assert toggled.json() == {"is_active": False}
        assert client.get("/coupons/active").json() == []
        assert len(client.get("/coupons", headers=admin_headers).json()) == 1

    def test_percentage_over_hundred(self, client, admin_headers):
        response = client.post(
            "/coupons",
            json={"code": "HUGE", "discount_type": "percentage", "discount_value": 120, "expires_at": _expiry()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "discount_value" in response.json()["errors"]

    def test_customers_cannot_list_all(self, client, auth_headers):
        assert client.get("/coupons", headers=auth_headers()).status_code == 403

    def test_delete(self, client, admin_headers, make_coupon):
        coupon = make_coupon()

        assert client.delete(f"/coupons/{coupon.id}", headers=admin_headers).status_code == 200
        assert current_domain.repository_for(Coupon).find_by_code("SAVE10") is None
