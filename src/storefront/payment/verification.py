"""Payment verification gate: the only path that marks an order paid.

Steps, in order:
    0. the order exists and is still awaiting payment
    1. the gateway order id is the intent recorded on this order
    2. the checkout signature matches the server secret
    3. the gateway reports the payment, made against that same intent
    4. the payment is captured or authorized
    5. the captured amount equals the order total in minor units
    6. one conditional write confirms the order

An operator holding the test capability who submits a payment id carrying
the configured test marker skips steps 1-5; the order is flagged as a test
order.
"""

from datetime import UTC, datetime
from decimal import Decimal

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.errors import Conflict, ExternalDependencyError, IntegrityViolation
from storefront.order.order import Order, PaymentInfo
from storefront.payment.gateway import get_gateway
from storefront.payment.gateway.port import GatewayError
from storefront.payment.signature import signature_matches
from storefront.pricing.engine import money, to_minor_units
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class VerifyPayment:
    order_id = Identifier(required=True)
    gateway_order_id = String(required=True, max_length=100)
    gateway_payment_id = String(required=True, max_length=100)
    signature = String(max_length=255)
    requester_id = Identifier()
    operator_capability = Boolean(default=False)


def bypass_allowed(operator_capability: bool, gateway_payment_id: str) -> bool:
    """Both the capability and the test marker are required."""
    marker = get_settings().test_payment_marker
    return bool(operator_capability) and bool(marker) and gateway_payment_id.startswith(marker)


@storefront.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        order = load(Order, command.order_id, "order_not_found")
        if not order.awaiting_payment():
            raise Conflict("order_not_pending", f"Order {order.id} is not awaiting payment")

        if bypass_allowed(command.operator_capability, command.gateway_payment_id):
            logger.warning(
                "payment_verification_bypassed",
                order_id=str(order.id),
                requester_id=command.requester_id,
                gateway_payment_id=command.gateway_payment_id,
            )
            payment_info = PaymentInfo(
                gateway_order_id=command.gateway_order_id,
                gateway_payment_id=command.gateway_payment_id,
                signature=command.signature,
                method="test",
                amount_paid=order.total_amount,
                paid_at=datetime.now(UTC),
                is_test_order=True,
            )
        else:
            payment_info = self._verified_payment(order, command)

        order.confirm_payment(payment_info)
        current_domain.repository_for(Order).commit_payment(order)

        logger.info(
            "payment_verified",
            order_id=str(order.id),
            gateway_payment_id=command.gateway_payment_id,
            is_test_order=bool(payment_info.is_test_order),
        )
        return str(order.id)

    def _verified_payment(self, order: Order, command) -> PaymentInfo:
        settings = get_settings()

        if not order.gateway_order_id or command.gateway_order_id != order.gateway_order_id:
            logger.warning(
                "payment_order_mismatch",
                order_id=str(order.id),
                expected=order.gateway_order_id,
                received=command.gateway_order_id,
            )
            raise IntegrityViolation(
                "payment_order_mismatch", "Payment was not made against this order's payment intent"
            )

        if not signature_matches(
            command.gateway_order_id,
            command.gateway_payment_id,
            command.signature,
            settings.payment_key_secret,
        ):
            logger.warning("payment_signature_invalid", order_id=str(order.id))
            raise IntegrityViolation("signature_invalid", "Payment signature verification failed")

        try:
            payment = get_gateway().fetch_payment(command.gateway_payment_id)
        except GatewayError as exc:
            logger.error("payment_lookup_failed", order_id=str(order.id), error=str(exc))
            raise ExternalDependencyError(
                "verification_unavailable", "Payment could not be verified with the gateway"
            ) from exc

        if payment.order_id is not None and payment.order_id != order.gateway_order_id:
            logger.warning("payment_order_mismatch", order_id=str(order.id), payment_order_id=payment.order_id)
            raise IntegrityViolation(
                "payment_order_mismatch", "Payment was not made against this order's payment intent"
            )

        if not payment.settled:
            raise Conflict("payment_not_completed", f"Payment status is {payment.status}")

        expected = to_minor_units(order.total_amount)
        if payment.amount != expected:
            logger.warning(
                "payment_amount_mismatch",
                order_id=str(order.id),
                expected=expected,
                received=payment.amount,
            )
            raise IntegrityViolation(
                "amount_mismatch",
                "Payment amount does not match the order total",
                expected=expected,
                received=payment.amount,
            )

        return PaymentInfo(
            gateway_order_id=command.gateway_order_id,
            gateway_payment_id=command.gateway_payment_id,
            signature=command.signature,
            method=payment.method,
            amount_paid=money(Decimal(payment.amount) / 100),
            paid_at=datetime.now(UTC),
            is_test_order=False,
        )
