"""Bearer tokens and the error body every rejection shares."""

from datetime import timedelta

import jwt
import pytest

from storefront.api.auth import decode_token, issue_token
from storefront.config import get_settings
from storefront.errors import Conflict, Unauthenticated


class TestTokens:
    def test_round_trip(self):
        identity = decode_token(issue_token("cust-9", is_admin=True))

        assert identity.user_id == "cust-9"
        assert identity.is_admin is True

    def test_expired(self):
        token = issue_token("cust-9", expires_in=timedelta(seconds=-1))

        with pytest.raises(Unauthenticated) as exc:
            decode_token(token)
        assert exc.value.reason == "token_expired"

    def test_signed_with_another_secret(self):
        token = jwt.encode({"sub": "cust-9"}, "not-the-secret", algorithm=get_settings().jwt_algorithm)

        with pytest.raises(Unauthenticated) as exc:
            decode_token(token)
        assert exc.value.reason == "token_invalid"

    def test_missing_subject(self):
        settings = get_settings()
        token = jwt.encode({"is_admin": True}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

        with pytest.raises(Unauthenticated):
            decode_token(token)


class TestErrorBodies:
    def test_rejection_body(self):
        body = Conflict("order_not_pending", "Order is paid", order_id="o-1").to_dict()

        assert body == {"reason": "order_not_pending", "message": "Order is paid", "context": {"order_id": "o-1"}}

    def test_default_message_from_reason(self):
        assert Conflict("duplicate_email").message == "duplicate email"

    def test_missing_customer_over_http(self, client, auth_headers):
        response = client.post("/customers/me/cart", json={"product_id": "p1", "quantity": 1}, headers=auth_headers())

        assert response.status_code == 404
        assert response.json()["reason"] == "customer_not_found"
        assert set(response.json()) == {"reason", "message", "errors"}

    def test_expired_token_over_http(self, client):
        token = issue_token("cust-9", expires_in=timedelta(seconds=-1))

        response = client.get("/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["reason"] == "token_expired"
