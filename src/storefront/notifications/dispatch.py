"""Turns order events into operator chat alerts and customer emails.

``notify`` never raises: delivery problems are logged and reported in the
returned results so callers on the order path are never affected.
"""

from html import escape

import structlog

from storefront.config import get_settings
from storefront.notifications.channel import CHAT, EMAIL, get_channel

logger = structlog.get_logger(__name__)


def _amount(value) -> str:
    return f"{get_settings().currency} {float(value or 0):,.2f}"


def _order_placed(payload: dict) -> tuple[str | None, tuple[str, str] | None]:
    chat = (
        f"<b>New order</b> {escape(payload['order_id'])}\n"
        f"Customer: {escape(payload['customer_name'])}\n"
        f"Items: {payload['item_count']}\n"
        f"Total: {_amount(payload['total_amount'])}\n"
        f"Payment: {escape(payload['payment_method'])}"
    )
    if payload.get("coupon_code"):
        chat += f"\nCoupon: {escape(payload['coupon_code'])} (-{_amount(payload['discount'])})"
    email = (
        f"Order {payload['order_id']} received",
        f"Hi {payload['customer_name']},\n\n"
        f"We have received your order {payload['order_id']} for {_amount(payload['total_amount'])}.\n"
        "We will let you know as soon as the payment is confirmed.\n",
    )
    return chat, email


def _payment_confirmed(payload: dict) -> tuple[str | None, tuple[str, str] | None]:
    label = " [TEST]" if payload.get("is_test_order") else ""
    chat = (
        f"<b>Payment received</b>{label}\n"
        f"Order: {escape(payload['order_id'])}\n"
        f"Amount: {_amount(payload['amount_paid'])}\n"
        f"Method: {escape(payload.get('payment_method') or 'unknown')}"
    )
    email = (
        f"Payment confirmed for order {payload['order_id']}",
        f"Hi {payload['customer_name']},\n\n"
        f"Your payment of {_amount(payload['amount_paid'])} for order {payload['order_id']} is confirmed.\n"
        "We are preparing your jewellery now.\n",
    )
    return chat, email


def _payment_failed(payload: dict) -> tuple[str | None, tuple[str, str] | None]:
    chat = (
        f"<b>Payment failed</b>\n"
        f"Order: {escape(payload['order_id'])}\n"
        f"Customer: {escape(payload['customer_name'])}\n"
        f"Reason: {escape(payload.get('error_description') or 'unknown')}"
    )
    return chat, None


def _status_changed(payload: dict) -> tuple[str | None, tuple[str, str] | None]:
    new_status = payload["new_status"]
    chat = f"Order {escape(payload['order_id'])}: {payload['previous_status']} -> {new_status}"
    body = f"Hi {payload['customer_name']},\n\nYour order {payload['order_id']} is now {new_status}.\n"
    if payload.get("tracking_number"):
        body += f"Tracking number: {payload['tracking_number']}\n"
    return chat, (f"Order {payload['order_id']} is {new_status}", body)


_FORMATTERS = {
    "order_placed": _order_placed,
    "payment_confirmed": _payment_confirmed,
    "payment_failed": _payment_failed,
    "order_status_changed": _status_changed,
}


def notify(event: str, payload: dict) -> list[dict]:
    """Send the chat alert and customer email for ``event``."""
    formatter = _FORMATTERS.get(event)
    if formatter is None:
        logger.warning("notification_event_unknown", notification_event=event)
        return []

    chat_message, email = formatter(payload)
    results = []

    if chat_message:
        results.append(_deliver(event, CHAT, lambda: get_channel(CHAT).send(chat_message)))

    if email and payload.get("email"):
        subject, body = email
        results.append(_deliver(event, EMAIL, lambda: get_channel(EMAIL).send(payload["email"], subject, body)))

    return results


def _deliver(event: str, channel: str, send) -> dict:
    try:
        result = send()
    except Exception as exc:
        logger.error("notification_dispatch_error", notification_event=event, channel=channel, error=str(exc))
        return {"channel": channel, "status": "failed", "error": str(exc)}

    if result.get("status") != "sent":
        logger.warning(
            "notification_delivery_failed",
            notification_event=event,
            channel=channel,
            error=result.get("error"),
        )
    else:
        logger.info("notification_sent", notification_event=event, channel=channel, message_id=result.get("message_id"))
    return {"channel": channel, **result}
