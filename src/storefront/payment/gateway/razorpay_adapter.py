"""Razorpay adapter speaking the REST API over requests with basic auth."""

import requests
import structlog

from storefront.payment.gateway.port import GatewayError, GatewayIntent, GatewayPayment, PaymentGateway

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    def __init__(
        self,
        base_url: str,
        key_id: str,
        key_secret: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (key_id, key_secret)

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            logger.warning("razorpay_request_failed", method=method, path=path, error=str(exc))
            raise GatewayError(f"Razorpay request failed: {exc}") from exc
        except ValueError as exc:
            raise GatewayError("Razorpay returned a malformed response") from exc

    def create_intent(self, amount_minor: int, currency: str, receipt: str) -> GatewayIntent:
        body = self._request(
            "POST",
            "/orders",
            json={"amount": amount_minor, "currency": currency, "receipt": receipt, "payment_capture": 1},
        )
        try:
            return GatewayIntent(
                intent_id=body["id"],
                amount=int(body["amount"]),
                currency=body.get("currency", currency),
                receipt=body.get("receipt", receipt),
                status=body.get("status", "created"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GatewayError("Razorpay order response is missing fields") from exc

    def fetch_payment(self, payment_id: str) -> GatewayPayment:
        body = self._request("GET", f"/payments/{payment_id}")
        try:
            return GatewayPayment(
                payment_id=body["id"],
                status=body["status"],
                amount=int(body["amount"]),
                currency=body.get("currency", "INR"),
                method=body.get("method"),
                order_id=body.get("order_id"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise GatewayError("Razorpay payment response is missing fields") from exc
