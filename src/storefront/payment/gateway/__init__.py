"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- RazorpayGateway when STOREFRONT_PAYMENT_GATEWAY=razorpay
"""

from storefront.config import get_settings
from storefront.payment.gateway.fake_adapter import FakeGateway
from storefront.payment.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.payment_gateway == "razorpay":
            from storefront.payment.gateway.razorpay_adapter import RazorpayGateway

            _current_gateway = RazorpayGateway(
                base_url=settings.payment_gateway_url,
                key_id=settings.payment_key_id,
                key_secret=settings.payment_key_secret,
                timeout=settings.payment_timeout_seconds,
            )
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the configured gateway."""
    global _current_gateway
    _current_gateway = None
