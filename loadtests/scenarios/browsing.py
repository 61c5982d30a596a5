"""Read-heavy storefront browsing journeys.

Anonymous visitors list the catalogue and its trending pieces, open product
pages, check the current silver rate and try a coupon against a made-up
subtotal.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState

COUPON_CODES = ["SAVE10", "FLAT100", "DIWALI10", "NOPE"]


class WindowShoppingJourney(SequentialTaskSet):
    """List Products -> Filter by Category -> Trending -> View Product (x2) -> Check Rate."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def list_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                self.state.product_ids = [product["id"] for product in resp.json()["products"]]
                if not self.state.product_ids:
                    resp.success()
                    self.interrupt()
            else:
                resp.failure(f"List products failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def filter_by_category(self):
        category = random.choice(["rings", "earrings", "anklets", "chains", "bracelets"])
        with self.client.get(
            "/products",
            params={"category": category},
            catch_response=True,
            name="GET /products?category",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Filter products failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def trending(self):
        with self.client.get("/products/trending", catch_response=True, name="GET /products/trending") as resp:
            if resp.status_code != 200:
                resp.failure(f"Trending products failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def view_product_1(self):
        self._view_product()

    @task
    def view_product_2(self):
        self._view_product()

    @task
    def check_rate(self):
        with self.client.get("/rates/current", catch_response=True, name="GET /rates/current") as resp:
            if resp.status_code == 404:
                # no rate recorded yet on a fresh deployment
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Current rate failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

    def _view_product(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.get(
            f"/products/{product_id}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View product failed: {resp.status_code}: {extract_error_detail(resp)}")


class CouponHunterJourney(SequentialTaskSet):
    """List Active Coupons -> Validate a Code against a Subtotal."""

    @task
    def list_active(self):
        with self.client.get("/coupons/active", catch_response=True, name="GET /coupons/active") as resp:
            if resp.status_code != 200:
                resp.failure(f"Active coupons failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def validate_code(self):
        payload = {"code": random.choice(COUPON_CODES), "subtotal": round(random.uniform(200, 5000), 2)}
        with self.client.post(
            "/coupons/validate",
            json=payload,
            catch_response=True,
            name="POST /coupons/validate",
        ) as resp:
            # unknown, expired or below-minimum codes are expected rejections
            if resp.status_code in (200, 400, 404):
                resp.success()
            else:
                resp.failure(f"Validate coupon failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BrowsingUser(HttpUser):
    wait_time = between(0.5, 2.0)
    tasks = {WindowShoppingJourney: 4, CouponHunterJourney: 1}
