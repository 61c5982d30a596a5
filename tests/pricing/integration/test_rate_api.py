"""Rate endpoints over HTTP."""

from datetime import UTC, datetime, timedelta

from protean import current_domain

from storefront.pricing.rate import CommodityRate


class TestReadRates:
    def test_current_rate_seeds_default(self, client):
        response = client.get("/rates/current")

        assert response.status_code == 200
        assert response.json()["price_per_gram"] == 152.0
        assert response.json()["source"] == "manual"

    def test_history_limit(self, client, admin_headers, record_rate):
        start = datetime.now(UTC) - timedelta(hours=3)
        for hours, price in enumerate((150.0, 151.0, 152.5)):
            record_rate(price, captured_at=start + timedelta(hours=hours))

        response = client.get("/rates/history", params={"limit": 2}, headers=admin_headers)

        assert [rate["price_per_gram"] for rate in response.json()] == [152.5, 151.0]

    def test_history_is_admin_only(self, client, auth_headers):
        assert client.get("/rates/history").status_code == 401

        response = client.get("/rates/history", headers=auth_headers())

        assert response.status_code == 403
        assert response.json()["reason"] == "admin_required"


class TestRecordRate:
    def test_admin_records_rate(self, client, admin_headers):
        response = client.post("/rates", json={"price_per_gram": 149.5}, headers=admin_headers)

        assert response.status_code == 201
        assert current_domain.repository_for(CommodityRate).get(response.json()["rate_id"]).price_per_gram == 149.5

    def test_requires_admin(self, client, auth_headers):
        response = client.post("/rates", json={"price_per_gram": 149.5}, headers=auth_headers())

        assert response.status_code == 403
        assert response.json()["reason"] == "admin_required"

    def test_requires_token(self, client):
        response = client.post("/rates", json={"price_per_gram": 149.5})

        assert response.status_code == 401
        assert response.json()["reason"] == "token_missing"

    def test_garbage_token(self, client):
        response = client.post("/rates", json={"price_per_gram": 149.5}, headers={"Authorization": "Bearer nope"})
        assert response.json()["reason"] == "token_invalid"


class TestRefreshRate:
    def test_provider_outage_is_503(self, client, admin_headers, rate_provider):
        rate_provider.configure(should_succeed=False)

        response = client.post("/rates/refresh", headers=admin_headers)

        assert response.status_code == 503
        assert response.json()["reason"] == "rate_provider_unavailable"

    def test_refresh(self, client, admin_headers, rate_provider):
        rate_provider.configure(rate_per_gram=155.25)

        response = client.post("/rates/refresh", headers=admin_headers)

        assert response.status_code == 201
        assert client.get("/rates/current").json()["price_per_gram"] == 155.25
