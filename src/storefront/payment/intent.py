"""Opening a payment intent with the gateway for a pending order."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.errors import Conflict, ExternalDependencyError
from storefront.order.order import Order
from storefront.payment.gateway import get_gateway
from storefront.payment.gateway.port import GatewayError
from storefront.pricing.engine import to_minor_units
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CreatePaymentIntent:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CreatePaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_intent(self, command):
        order = load(Order, command.order_id, "order_not_found")
        if not order.awaiting_payment():
            raise Conflict("order_not_pending", f"Order {order.id} is not awaiting payment")

        amount_minor = to_minor_units(order.total_amount)
        if amount_minor <= 0:
            raise ValidationError({"total_amount": ["Order total must be positive to collect payment"]})

        currency = get_settings().currency
        try:
            intent = get_gateway().create_intent(amount_minor, currency, receipt=f"order_{order.id}")
        except GatewayError as exc:
            logger.error("payment_intent_failed", order_id=str(order.id), error=str(exc))
            raise ExternalDependencyError("gateway_unavailable", "Payment gateway could not create the intent") from exc

        order.record_payment_intent(intent.intent_id, amount_minor, currency)
        current_domain.repository_for(Order).add(order)

        logger.info("payment_intent_created", order_id=str(order.id), gateway_order_id=intent.intent_id)
        return intent
