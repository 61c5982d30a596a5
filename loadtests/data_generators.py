"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas and
pass the storefront's validation rules.
"""

import base64
import random
import uuid

from faker import Faker

fake = Faker("en_IN")

CATEGORIES = ["rings", "earrings", "anklets", "chains", "bracelets"]

# 1x1 transparent PNG
PIXEL_PNG = base64.b64encode(
    bytes.fromhex(
        "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
        "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
    )
).decode()


def unique_email() -> str:
    return f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:6]}@example.com"


def customer_data() -> dict:
    return {"name": fake.name()[:100], "email": unique_email(), "phone": fake.msisdn()[:10]}


def product_code() -> str:
    return f"LT-{uuid.uuid4().hex[:8].upper()}"


def product_data() -> dict:
    """A weighted product; roughly one in five is flat-priced."""
    weighted = random.random() > 0.2
    net_weight = round(random.uniform(2.0, 40.0), 2) if weighted else 0.0
    category = random.choice(CATEGORIES)
    return {
        "name": f"{fake.word().capitalize()} {category[:-1].title()}",
        "code": product_code(),
        "base_price": round(random.uniform(100, 2000), 2),
        "net_weight": net_weight,
        "gross_weight": round(net_weight * 1.1, 2),
        "silver_weight": round(net_weight * 0.925, 2),
        "making_charge_rate": round(random.uniform(10, 80), 2) if weighted else 0.0,
        "category": category,
        "description": fake.sentence(),
        "images": [{"filename": f"{uuid.uuid4().hex[:8]}.png", "content": PIXEL_PNG}],
    }


def rate_data() -> dict:
    return {"price_per_gram": round(random.uniform(140, 170), 2)}


def order_data(product_ids: list[str]) -> dict:
    lines = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    return {
        "customer_name": fake.name()[:100],
        "email": unique_email(),
        "phone": fake.msisdn()[:10],
        "address": fake.street_address()[:500],
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "zip_code": fake.postcode()[:20],
        "items": [{"product_id": product_id, "quantity": random.randint(1, 3)} for product_id in lines],
        "payment_method": "razorpay",
        "delivery_charge": random.choice([0, 50, 99]),
    }


def payment_failure_data(order_id: str) -> dict:
    return {
        "order_id": order_id,
        "error_code": "BAD_REQUEST_ERROR",
        "error_description": random.choice(["Card declined", "UPI request expired", "Bank timeout"]),
    }
