import pytest
from protean import current_domain

from storefront.order.order import Order
from storefront.pricing.engine import to_minor_units

GATEWAY_ORDER_ID = "order_gw_1"


@pytest.fixture()
def pending_order(make_product, place_order):
    """A pending order totalling 970.00: 900 of product, 50 delivery, 20 packing."""
    product = make_product(base_price=1000.0)
    return place_order(
        [(product.id, 1)],
        delivery_charge=50.0,
        additional_charges=[{"name": "Packing", "amount": 20.0}],
        customer_id="cust-1",
    )


@pytest.fixture()
def open_intent():
    """Record a gateway intent on an order, as checkout does before payment."""

    def _open(order, gateway_order_id=GATEWAY_ORDER_ID):
        repo = current_domain.repository_for(Order)
        stored = repo.get(order.id)
        stored.record_payment_intent(gateway_order_id, to_minor_units(stored.total_amount), "INR")
        repo.add(stored)
        return repo.get(order.id)

    return _open


@pytest.fixture()
def intent_order(pending_order, open_intent):
    """``pending_order`` with gateway intent ``order_gw_1`` recorded."""
    return open_intent(pending_order)
