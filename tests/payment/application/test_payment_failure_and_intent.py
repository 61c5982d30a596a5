"""Payment failure reports and gateway payment intents."""

import pytest
from protean import current_domain

from storefront.errors import Conflict, ExternalDependencyError, NotFound
from storefront.order.order import Order, PaymentInfo
from storefront.payment.failure import ReportPaymentFailure
from storefront.payment.intent import CreatePaymentIntent


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


def _confirm(order):
    stored = _reload(order)
    stored.confirm_payment(PaymentInfo(gateway_payment_id="pay_1", amount_paid=stored.total_amount))
    current_domain.repository_for(Order).add(stored)


def _report(order_id, **fields):
    return current_domain.process(ReportPaymentFailure(order_id=order_id, **fields), asynchronous=False)


class TestReportPaymentFailure:
    def test_cancels_pending_order(self, pending_order):
        assert _report(str(pending_order.id), error_code="BAD_REQUEST_ERROR", error_description="Card declined") is True

        stored = _reload(pending_order)
        assert stored.payment_status == "failed"
        assert stored.order_status == "cancelled"
        assert stored.payment_info.error_code == "BAD_REQUEST_ERROR"
        assert stored.payment_info.error_description == "Card declined"

    def test_unknown_order_is_accepted(self):
        assert _report("missing") is False

    def test_paid_order_is_left_alone(self, pending_order):
        _confirm(pending_order)

        assert _report(str(pending_order.id), error_code="LATE") is False
        assert _reload(pending_order).payment_status == "completed"

    def test_repeat_report_is_accepted(self, pending_order):
        _report(str(pending_order.id))
        assert _report(str(pending_order.id)) is False


class TestCreatePaymentIntent:
    def test_opens_intent_in_minor_units(self, pending_order, gateway):
        intent = current_domain.process(CreatePaymentIntent(order_id=str(pending_order.id)), asynchronous=False)

        assert intent.amount == 97000
        assert intent.currency == "INR"
        assert gateway.calls[0]["receipt"] == f"order_{pending_order.id}"
        assert _reload(pending_order).gateway_order_id == intent.intent_id

    def test_paid_order_rejected(self, pending_order, gateway):
        _confirm(pending_order)

        with pytest.raises(Conflict):
            current_domain.process(CreatePaymentIntent(order_id=str(pending_order.id)), asynchronous=False)
        assert gateway.calls == []

    def test_gateway_failure(self, pending_order, gateway):
        gateway.configure(should_succeed=False)

        with pytest.raises(ExternalDependencyError) as exc:
            current_domain.process(CreatePaymentIntent(order_id=str(pending_order.id)), asynchronous=False)

        assert exc.value.reason == "gateway_unavailable"
        assert _reload(pending_order).gateway_order_id is None

    def test_unknown_order(self, gateway):
        with pytest.raises(NotFound) as exc:
            current_domain.process(CreatePaymentIntent(order_id="missing"), asynchronous=False)
        assert exc.value.reason == "order_not_found"
