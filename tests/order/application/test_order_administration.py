"""Operator edits to placed orders and scoped order reads."""

import json

import pytest
from protean import current_domain

from storefront.errors import AccessDenied, Conflict, NotFound
from storefront.order.administration import AnnotateOrder, ChangeOrderStatus, MarkOrderRefunded, UpdateOrderCharges
from storefront.order.order import Order, PaymentInfo
from storefront.order.queries import get_order, list_orders


@pytest.fixture()
def order(make_product, place_order):
    product = make_product(base_price=1000.0)
    return place_order([(product.id, 1)], delivery_charge=50.0, customer_id="cust-1")


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


def _confirm(order):
    stored = _reload(order)
    stored.confirm_payment(PaymentInfo(gateway_payment_id="pay_1", amount_paid=stored.total_amount))
    current_domain.repository_for(Order).add(stored)


class TestUpdateCharges:
    def test_recomputes_from_stored_subtotal(self, order):
        total = current_domain.process(
            UpdateOrderCharges(order_id=str(order.id), additional_charges=json.dumps([{"name": "Packing", "amount": 25}])),
            asynchronous=False,
        )

        assert total == 975.0
        assert _reload(order).total_amount == 975.0

    def test_unknown_order(self):
        with pytest.raises(NotFound) as exc:
            current_domain.process(UpdateOrderCharges(order_id="missing", additional_charges="[]"), asynchronous=False)
        assert exc.value.reason == "order_not_found"


class TestStatusChanges:
    def test_advance_after_payment(self, order):
        _confirm(order)

        current_domain.process(ChangeOrderStatus(order_id=str(order.id), order_status="processing"), asynchronous=False)

        assert _reload(order).order_status == "processing"

    def test_invalid_transition(self, order):
        with pytest.raises(Conflict):
            current_domain.process(ChangeOrderStatus(order_id=str(order.id), order_status="delivered"), asynchronous=False)
        assert _reload(order).order_status == "pending"

    def test_annotate(self, order):
        current_domain.process(AnnotateOrder(order_id=str(order.id), tracking_number="DTDC123"), asynchronous=False)
        assert _reload(order).tracking_number == "DTDC123"

    def test_cash_on_delivery_order_fulfilled_without_gateway(self, make_product, place_order):
        order = place_order([(make_product().id, 1)], customer_id="cust-1", payment_method="cod")

        for status in ("processing", "shipped", "delivered"):
            current_domain.process(ChangeOrderStatus(order_id=str(order.id), order_status=status), asynchronous=False)

        stored = _reload(order)
        assert stored.order_status == "delivered"
        assert stored.payment_status == "completed"
        assert stored.payment_info.method == "cod"

    def test_cancelled_order_cannot_be_confirmed(self, order):
        current_domain.process(ChangeOrderStatus(order_id=str(order.id), order_status="cancelled"), asynchronous=False)

        with pytest.raises(Conflict):
            _confirm(order)
        assert _reload(order).order_status == "cancelled"


class TestRefunds:
    def test_refund_completed_order(self, order):
        _confirm(order)
        current_domain.process(MarkOrderRefunded(order_id=str(order.id)), asynchronous=False)
        assert _reload(order).payment_status == "refunded"

    def test_pending_order_not_refundable(self, order):
        with pytest.raises(Conflict):
            current_domain.process(MarkOrderRefunded(order_id=str(order.id)), asynchronous=False)


class TestQueries:
    def test_customer_sees_only_own_orders(self, make_product, place_order):
        product = make_product()
        mine = place_order([(product.id, 1)], customer_id="cust-1")
        place_order([(product.id, 1)], customer_id="cust-2")

        assert [str(o.id) for o in list_orders("cust-1", is_admin=False)] == [str(mine.id)]
        assert len(list_orders("cust-1", is_admin=True)) == 2

    def test_other_customers_order_forbidden(self, order):
        with pytest.raises(AccessDenied):
            get_order(str(order.id), "cust-2", is_admin=False)

    def test_admin_reads_any_order(self, order):
        assert str(get_order(str(order.id), "admin-1", is_admin=True).id) == str(order.id)

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            get_order("missing", "cust-1", is_admin=False)
