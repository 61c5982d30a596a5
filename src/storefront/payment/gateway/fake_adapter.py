"""Configurable fake payment gateway for development and testing.

Payments are registered up front with ``register_payment``; fetching an
unknown id fails the same way the real gateway would.
"""

from uuid import uuid4

from storefront.payment.gateway.port import GatewayError, GatewayIntent, GatewayPayment, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.payments: dict[str, GatewayPayment] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def register_payment(
        self,
        payment_id: str,
        amount: int,
        status: str = "captured",
        method: str | None = "upi",
        currency: str = "INR",
        order_id: str | None = None,
    ) -> GatewayPayment:
        payment = GatewayPayment(
            payment_id=payment_id,
            status=status,
            amount=amount,
            currency=currency,
            method=method,
            order_id=order_id,
        )
        self.payments[payment_id] = payment
        return payment

    def create_intent(self, amount_minor: int, currency: str, receipt: str) -> GatewayIntent:
        self.calls.append({"method": "create_intent", "amount": amount_minor, "currency": currency, "receipt": receipt})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        return GatewayIntent(
            intent_id=f"order_fake_{uuid4().hex[:14]}",
            amount=amount_minor,
            currency=currency,
            receipt=receipt,
        )

    def fetch_payment(self, payment_id: str) -> GatewayPayment:
        self.calls.append({"method": "fetch_payment", "payment_id": payment_id})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        if payment_id not in self.payments:
            raise GatewayError(f"Payment {payment_id} not found")
        return self.payments[payment_id]
