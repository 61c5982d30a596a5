import base64
import json
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Initialize the storefront domain before collection.

    Test modules import command and aggregate classes at module level, so the
    domain must be initialized before they are collected.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("STOREFRONT_ENVIRONMENT", "test")

    from storefront.domain import storefront

    storefront.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Push domain context before each test, cleanup after."""
    from storefront.domain import storefront

    ctx = storefront.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def fresh_collaborators():
    """Fresh settings and fake adapters for every test."""
    from storefront.catalogue.images import reset_image_store
    from storefront.config import get_settings
    from storefront.notifications.channel import reset_channels
    from storefront.payment.gateway import reset_gateway
    from storefront.pricing.provider import reset_rate_provider

    def _reset():
        get_settings.cache_clear()
        reset_image_store()
        reset_gateway()
        reset_rate_provider()
        reset_channels()

    _reset()
    yield
    _reset()


# ---------------------------------------------------------------------------
# Fake adapters
# ---------------------------------------------------------------------------
@pytest.fixture()
def image_store():
    from storefront.catalogue.images import set_image_store
    from storefront.catalogue.images.fake_adapter import FakeImageStore

    store = FakeImageStore()
    set_image_store(store)
    return store


@pytest.fixture()
def gateway():
    from storefront.payment.gateway import set_gateway
    from storefront.payment.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def rate_provider():
    from storefront.pricing.provider import set_rate_provider
    from storefront.pricing.provider.fake_adapter import FakeRateProvider

    fake = FakeRateProvider()
    set_rate_provider(fake)
    return fake


@pytest.fixture()
def chat():
    from storefront.notifications.channel import CHAT, set_channel
    from storefront.notifications.channel.fake_chat import FakeChatAdapter

    fake = FakeChatAdapter()
    set_channel(CHAT, fake)
    return fake


@pytest.fixture()
def mailbox():
    from storefront.notifications.channel import EMAIL, set_channel
    from storefront.notifications.channel.fake_email import FakeEmailAdapter

    fake = FakeEmailAdapter()
    set_channel(EMAIL, fake)
    return fake


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def image_payload():
    """Build a JSON upload payload with ``count`` tiny base64 files."""

    def _payload(count: int = 1) -> str:
        content = base64.b64encode(b"\x89PNG fake").decode()
        return json.dumps([{"filename": f"image-{index}.png", "content": content} for index in range(count)])

    return _payload


@pytest.fixture()
def record_rate():
    """Append a rate to the rate log."""
    from protean import current_domain

    from storefront.pricing.rate import CommodityRate

    def _record(price_per_gram: float = 100.0, source: str = "manual", captured_at=None):
        rate = CommodityRate.record(price_per_gram=price_per_gram, source=source, captured_at=captured_at)
        current_domain.repository_for(CommodityRate).add(rate)
        return rate

    return _record


@pytest.fixture()
def make_product():
    """Persist a product with placeholder image URLs."""
    from protean import current_domain

    from storefront.catalogue.product import Product
    from storefront.pricing.rate import CommodityRate

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        rate = current_domain.repository_for(CommodityRate).latest()
        fields = {
            "name": f"Silver Piece {counter['n']}",
            "code": f"SP-{counter['n']:03d}",
            "base_price": 1000.0,
            "image_urls": [f"https://images.storefront.test/sp-{counter['n']}.png"],
            "rate_per_gram": rate.price_per_gram,
        }
        fields.update(overrides)
        product = Product.create(**fields)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_coupon():
    from protean import current_domain

    from storefront.coupon.coupon import Coupon

    def _make(**overrides):
        fields = {
            "code": "SAVE10",
            "discount_type": "percentage",
            "discount_value": 10.0,
            "expires_at": datetime.now(UTC) + timedelta(days=30),
        }
        fields.update(overrides)
        coupon = Coupon.create(**fields)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def place_order():
    """Place an order through the command handler and return the stored Order."""
    from protean import current_domain

    from storefront.order.order import Order
    from storefront.order.placement import PlaceOrder

    def _place(lines, coupon_code=None, delivery_charge=0.0, additional_charges=None, customer_id=None, **overrides):
        fields = {
            "customer_id": customer_id,
            "customer_name": "Asha Rao",
            "email": "asha@example.com",
            "phone": "9876543210",
            "address": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "zip_code": "560001",
            "items": json.dumps([{"product_id": str(product_id), "quantity": quantity} for product_id, quantity in lines]),
            "payment_method": "razorpay",
            "delivery_charge": delivery_charge,
            "additional_charges": json.dumps(additional_charges or []),
            "coupon_code": coupon_code,
        }
        fields.update(overrides)
        order_id = current_domain.process(PlaceOrder(**fields), asynchronous=False)
        return current_domain.repository_for(Order).get(order_id)

    return _place


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from protean.integrations.fastapi import register_exception_handlers

    from storefront.api.coupons import coupon_router
    from storefront.api.customers import customer_router
    from storefront.api.errors import register_error_handlers
    from storefront.api.orders import order_router
    from storefront.api.payments import payment_router
    from storefront.api.products import product_router
    from storefront.api.rates import rate_router

    app = FastAPI()
    for router in (product_router, rate_router, customer_router, coupon_router, order_router, payment_router):
        app.include_router(router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    """Bearer headers for a user id, optionally with admin rights."""
    from storefront.api.auth import issue_token

    def _headers(user_id: str = "cust-1", is_admin: bool = False) -> dict:
        return {"Authorization": f"Bearer {issue_token(user_id, is_admin=is_admin)}"}

    return _headers


@pytest.fixture()
def admin_headers(auth_headers):
    return auth_headers("admin-1", is_admin=True)
