"""FastAPI endpoints for collecting and verifying payments.

Every route needs a signed-in caller who owns the order, or an admin.
The handlers talk to the payment gateway over blocking HTTP, so the routes
are plain functions that FastAPI runs in its threadpool.
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Identity, current_identity
from storefront.api.schemas import (
    CreateIntentRequest,
    PaymentFailureRequest,
    PaymentIntentResponse,
    StatusResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from storefront.config import get_settings
from storefront.order.order import Order
from storefront.order.queries import payable_by
from storefront.payment.failure import ReportPaymentFailure
from storefront.payment.intent import CreatePaymentIntent
from storefront.payment.verification import VerifyPayment

payment_router = APIRouter(prefix="/payments", tags=["payments"])


def operator_capability(identity: Identity, order: Order | None) -> bool:
    """An admin placing and paying for their own order may use test payments."""
    return identity.is_admin and order is not None and order.belongs_to(identity.user_id)


@payment_router.post("/intents", status_code=201, response_model=PaymentIntentResponse)
def create_intent(body: CreateIntentRequest, identity: Identity = Depends(current_identity)) -> PaymentIntentResponse:
    payable_by(body.order_id, identity.user_id, identity.is_admin)
    intent = current_domain.process(CreatePaymentIntent(order_id=body.order_id), asynchronous=False)
    return PaymentIntentResponse(
        gateway_order_id=intent.intent_id,
        amount=intent.amount,
        currency=intent.currency,
        key_id=get_settings().payment_key_id,
    )


@payment_router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment(body: VerifyPaymentRequest, identity: Identity = Depends(current_identity)) -> VerifyPaymentResponse:
    order = payable_by(body.order_id, identity.user_id, identity.is_admin)
    command = VerifyPayment(
        order_id=body.order_id,
        gateway_order_id=body.gateway_order_id,
        gateway_payment_id=body.gateway_payment_id,
        signature=body.signature,
        requester_id=identity.user_id,
        operator_capability=operator_capability(identity, order),
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return VerifyPaymentResponse(
        order_id=str(order.id),
        payment_status=order.payment_status,
        order_status=order.order_status,
        is_test_order=bool(order.payment_info and order.payment_info.is_test_order),
    )


@payment_router.post("/failure", response_model=StatusResponse)
def report_failure(body: PaymentFailureRequest, identity: Identity = Depends(current_identity)) -> StatusResponse:
    payable_by(body.order_id, identity.user_id, identity.is_admin)
    command = ReportPaymentFailure(
        order_id=body.order_id,
        error_code=body.error_code,
        error_description=body.error_description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
