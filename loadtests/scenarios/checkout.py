"""Stateful checkout and back-office journeys.

Shoppers register, fill a cart, place an order and open a payment intent.
Real gateway signatures cannot be produced under load, so the journey ends
by reporting a declined payment, which exercises the failure path and the
notification fan-out. Back-office users record rates and maintain the
catalogue with an admin token minted locally.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    customer_data,
    order_data,
    payment_failure_data,
    product_data,
    rate_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CatalogueState, ShopperState
from storefront.api.auth import issue_token


def bearer(user_id: str, is_admin: bool = False) -> dict:
    return {"Authorization": f"Bearer {issue_token(user_id, is_admin=is_admin)}"}


class CheckoutJourney(SequentialTaskSet):
    """Register -> Browse -> Add to Cart -> View Cart -> Place Order -> Open Intent -> Payment Declined."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def register(self):
        with self.client.post(
            "/customers",
            json=customer_data(),
            catch_response=True,
            name="POST /customers",
        ) as resp:
            if resp.status_code == 201:
                self.state.customer_id = resp.json()["customer_id"]
                self.state.headers = bearer(self.state.customer_id)
            else:
                resp.failure(f"Register failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse(self):
        with self.client.get(
            "/products",
            params={"in_stock": "true"},
            catch_response=True,
            name="GET /products?in_stock",
        ) as resp:
            if resp.status_code == 200:
                self.state.product_ids = [product["id"] for product in resp.json()["products"]]
                if not self.state.product_ids:
                    resp.success()
                    self.interrupt()
            else:
                resp.failure(f"List products failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_to_cart(self):
        for product_id in random.sample(self.state.product_ids, k=min(2, len(self.state.product_ids))):
            with self.client.post(
                "/customers/me/cart",
                json={"product_id": product_id, "quantity": random.randint(1, 2)},
                headers=self.state.headers,
                catch_response=True,
                name="POST /customers/me/cart",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Add to cart failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        with self.client.get(
            "/customers/me/cart",
            headers=self.state.headers,
            catch_response=True,
            name="GET /customers/me/cart",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.product_ids),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.total_amount = body["total_amount"]
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def open_intent(self):
        with self.client.post(
            "/payments/intents",
            json={"order_id": self.state.order_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /payments/intents",
        ) as resp:
            if resp.status_code == 201:
                self.state.gateway_order_id = resp.json()["gateway_order_id"]
            else:
                resp.failure(f"Payment intent failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def payment_declined(self):
        with self.client.post(
            "/payments/failure",
            json=payment_failure_data(self.state.order_id),
            headers=self.state.headers,
            catch_response=True,
            name="POST /payments/failure",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Report failure failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def view_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class BackOfficeJourney(SequentialTaskSet):
    """Record Rate -> Create Product -> Update Price -> View Product -> List Orders."""

    def on_start(self):
        self.state = CatalogueState(headers=bearer("loadtest-admin", is_admin=True))

    @task
    def record_rate(self):
        with self.client.post(
            "/rates",
            json=rate_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /rates",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Record rate failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def update_price(self):
        with self.client.put(
            f"/products/{self.state.product_id}",
            json={"base_price": round(random.uniform(100, 2000), 2)},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update product failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def view_product(self):
        with self.client.get(
            f"/products/{self.state.product_id}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"View product failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def list_orders(self):
        with self.client.get(
            "/orders",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    wait_time = between(1.0, 3.0)
    tasks = [CheckoutJourney]


class BackOfficeUser(HttpUser):
    wait_time = between(2.0, 5.0)
    tasks = [BackOfficeJourney]
