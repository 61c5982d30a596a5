"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    customer_id: str | None = None
    headers: dict = field(default_factory=dict)
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    total_amount: float = 0.0
    gateway_order_id: str | None = None


@dataclass
class CatalogueState:
    headers: dict = field(default_factory=dict)
    product_id: str | None = None
