"""Payment gateway port (abstract interface).

Amounts cross this boundary in minor units (paise). Adapters translate
transport failures into GatewayError so the application layer never sees
a library-specific exception.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

SETTLED_STATUSES = frozenset({"captured", "authorized"})


class GatewayError(Exception):
    """The gateway could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class GatewayIntent:
    """A payment intent (gateway-side order) created for a storefront order."""

    intent_id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"


@dataclass(frozen=True)
class GatewayPayment:
    """The gateway's record of a payment."""

    payment_id: str
    status: str
    amount: int
    currency: str = "INR"
    method: str | None = None
    order_id: str | None = None  # gateway-side order the payment was made against

    @property
    def settled(self) -> bool:
        return self.status in SETTLED_STATUSES


class PaymentGateway(ABC):
    @abstractmethod
    def create_intent(self, amount_minor: int, currency: str, receipt: str) -> GatewayIntent:
        """Open a payment intent for ``amount_minor`` with the gateway."""
        ...

    @abstractmethod
    def fetch_payment(self, payment_id: str) -> GatewayPayment:
        """Look up a payment by its gateway id."""
        ...
