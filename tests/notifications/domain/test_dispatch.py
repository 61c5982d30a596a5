"""Notification dispatch: message formatting and best-effort delivery."""

from structlog.testing import capture_logs

from storefront.notifications.dispatch import notify
from storefront.notifications.channel import EMAIL, set_channel


class _ExplodingEmail:
    def send(self, to, subject, body):
        raise ConnectionError("SMTP down")


def _placed(**overrides):
    payload = {
        "order_id": "order-1",
        "customer_name": "Asha <Rao>",
        "email": "asha@example.com",
        "item_count": 2,
        "total_amount": 1870.0,
        "discount": 0.0,
        "coupon_code": None,
        "payment_method": "razorpay",
    }
    payload.update(overrides)
    return payload


class TestOrderPlaced:
    def test_sends_chat_alert_and_customer_email(self, chat, mailbox):
        results = notify("order_placed", _placed())

        assert [result["status"] for result in results] == ["sent", "sent"]
        assert "INR 1,870.00" in chat.sent_messages[0]["message"]
        assert mailbox.sent_emails[0]["to"] == "asha@example.com"
        assert "order-1" in mailbox.sent_emails[0]["subject"]

    def test_chat_text_is_escaped(self, chat, mailbox):
        notify("order_placed", _placed())
        assert "Asha &lt;Rao&gt;" in chat.sent_messages[0]["message"]

    def test_coupon_line(self, chat, mailbox):
        notify("order_placed", _placed(coupon_code="SAVE10", discount=180.0))
        assert "Coupon: SAVE10 (-INR 180.00)" in chat.sent_messages[0]["message"]

    def test_no_email_without_address(self, chat, mailbox):
        notify("order_placed", _placed(email=None))
        assert mailbox.sent_emails == []
        assert len(chat.sent_messages) == 1


class TestPaymentNotifications:
    def test_test_orders_are_labelled(self, chat, mailbox):
        notify(
            "payment_confirmed",
            {
                "order_id": "order-1",
                "customer_name": "Asha",
                "email": "asha@example.com",
                "amount_paid": 970.0,
                "payment_method": "test",
                "is_test_order": True,
            },
        )
        assert "[TEST]" in chat.sent_messages[0]["message"]

    def test_failure_alerts_operator_only(self, chat, mailbox):
        notify(
            "payment_failed",
            {"order_id": "order-1", "customer_name": "Asha", "email": "asha@example.com", "error_description": None},
        )

        assert "Reason: unknown" in chat.sent_messages[0]["message"]
        assert mailbox.sent_emails == []

    def test_status_change_includes_tracking(self, chat, mailbox):
        notify(
            "order_status_changed",
            {
                "order_id": "order-1",
                "customer_name": "Asha",
                "email": "asha@example.com",
                "previous_status": "processing",
                "new_status": "shipped",
                "tracking_number": "DTDC123",
            },
        )
        assert "Tracking number: DTDC123" in mailbox.sent_emails[0]["body"]


class TestDeliveryFailures:
    def test_failed_channel_reported_not_raised(self, chat, mailbox):
        chat.configure(should_succeed=False)

        results = notify("order_placed", _placed())

        assert results[0] == {"channel": "chat", "message_id": None, "status": "failed", "error": "Chat delivery failed"}
        assert results[1]["status"] == "sent"

    def test_exception_in_adapter_is_swallowed(self, chat):
        set_channel(EMAIL, _ExplodingEmail())

        results = notify("order_placed", _placed())

        assert results[1] == {"channel": "email", "status": "failed", "error": "SMTP down"}
        assert len(chat.sent_messages) == 1

    def test_unknown_event(self, chat):
        with capture_logs() as logs:
            assert notify("stock_low", {}) == []

        assert chat.sent_messages == []
        assert logs == [
            {"event": "notification_event_unknown", "notification_event": "stock_low", "log_level": "warning"}
        ]
