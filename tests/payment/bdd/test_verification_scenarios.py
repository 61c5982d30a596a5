"""BDD tests for payment verification."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.config import get_settings
from storefront.errors import StorefrontError
from storefront.order.order import Order
from storefront.payment.signature import sign
from storefront.payment.verification import VerifyPayment

scenarios("features/payment_verification.feature")

GATEWAY_ORDER_ID = "order_gw_bdd"


@pytest.fixture()
def error():
    """Container for the captured rejection."""
    return {"exc": None}


def _verify(order, payment_id, signature, gateway_order_id=GATEWAY_ORDER_ID):
    current_domain.process(
        VerifyPayment(
            order_id=str(order.id),
            gateway_order_id=gateway_order_id,
            gateway_payment_id=payment_id,
            signature=signature,
        ),
        asynchronous=False,
    )


def _valid_signature(payment_id):
    return sign(GATEWAY_ORDER_ID, payment_id, get_settings().payment_key_secret)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a pending order totalling {total:f}"), target_fixture="order")
def pending_order_totalling(pending_order, open_intent, total):
    assert pending_order.total_amount == total
    return open_intent(pending_order, GATEWAY_ORDER_ID)


@given(parsers.cfparse('the gateway captured {amount:d} paise for payment "{payment_id}"'))
def captured(gateway, amount, payment_id):
    gateway.register_payment(payment_id, amount)


@given(parsers.cfparse('payment "{payment_id}" has already been verified'))
def already_verified(order, payment_id):
    _verify(order, payment_id, _valid_signature(payment_id))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('payment "{payment_id}" is verified with a valid signature'))
def verify_valid(order, payment_id, error):
    try:
        _verify(order, payment_id, _valid_signature(payment_id))
    except StorefrontError as exc:
        error["exc"] = exc


@when(parsers.cfparse('payment "{payment_id}" is verified against gateway order "{gateway_order_id}"'))
def verify_other_intent(order, payment_id, gateway_order_id, error):
    try:
        _verify(order, payment_id, sign(gateway_order_id, payment_id, get_settings().payment_key_secret), gateway_order_id)
    except StorefrontError as exc:
        error["exc"] = exc


@when(parsers.cfparse('payment "{payment_id}" is verified with a forged signature'))
def verify_forged(order, payment_id, error):
    try:
        _verify(order, payment_id, "f" * 64)
    except StorefrontError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _stored(order):
    return current_domain.repository_for(Order).get(order.id)


@then("the order is completed and confirmed")
def completed(order):
    stored = _stored(order)
    assert stored.payment_status == "completed"
    assert stored.order_status == "confirmed"


@then("the order is still pending")
def still_pending(order):
    stored = _stored(order)
    assert stored.payment_status == "pending"
    assert stored.payment_info is None


@then(parsers.cfparse('verification is rejected with reason "{reason}"'))
def rejected(error, reason):
    assert error["exc"] is not None
    assert error["exc"].reason == reason
