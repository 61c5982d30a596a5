"""Razorpay adapter request shape and error mapping."""

import pytest
import requests

from storefront.payment.gateway.port import GatewayError
from storefront.payment.gateway.razorpay_adapter import RazorpayGateway


class _Response:
    def __init__(self, payload, status_error=None):
        self._payload = payload
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response=None, error=None):
        self.auth = None
        self.response = response
        self.error = error
        self.requests = []

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        if self.error:
            raise self.error
        return self.response


def _gateway(session):
    return RazorpayGateway("https://api.razorpay.test/v1/", "key", "secret", timeout=5.0, session=session)


class TestCreateIntent:
    def test_posts_order(self):
        session = _Session(_Response({"id": "order_abc", "amount": 97000, "currency": "INR", "receipt": "order_1"}))

        intent = _gateway(session).create_intent(97000, "INR", receipt="order_1")

        assert intent.intent_id == "order_abc"
        assert intent.amount == 97000
        sent = session.requests[0]
        assert sent["method"] == "POST"
        assert sent["url"] == "https://api.razorpay.test/v1/orders"
        assert sent["json"]["amount"] == 97000
        assert session.auth == ("key", "secret")

    def test_missing_fields(self):
        with pytest.raises(GatewayError):
            _gateway(_Session(_Response({"status": "created"}))).create_intent(100, "INR", receipt="r")


class TestFetchPayment:
    def test_reads_payment(self):
        body = {"id": "pay_1", "status": "captured", "amount": 97000, "method": "upi", "order_id": "order_gw_1"}
        session = _Session(_Response(body))

        payment = _gateway(session).fetch_payment("pay_1")

        assert payment.settled
        assert payment.amount == 97000
        assert payment.method == "upi"
        assert payment.order_id == "order_gw_1"
        assert session.requests[0]["url"].endswith("/payments/pay_1")

    def test_timeout(self):
        with pytest.raises(GatewayError):
            _gateway(_Session(error=requests.Timeout("slow"))).fetch_payment("pay_1")

    def test_http_error(self):
        session = _Session(_Response({}, status_error=requests.HTTPError("401 Unauthorized")))
        with pytest.raises(GatewayError):
            _gateway(session).fetch_payment("pay_1")
