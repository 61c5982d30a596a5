"""Domain events for the Order aggregate.

Notifications subscribe to these; none of them carries anything a consumer
would need to read back from the store to send a message.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    customer_name = String(required=True)
    email = String(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    discount = Float(required=True)
    total_amount = Float(required=True)
    coupon_code = String()
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentIntentRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    gateway_order_id = String(required=True)
    amount_minor = Integer(required=True)
    currency = String(required=True)


@storefront.event(part_of="Order")
class OrderPaymentConfirmed:
    """Payment passed verification and the order is confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True)
    email = String(required=True)
    gateway_payment_id = String()
    payment_method = String()
    amount_paid = Float(required=True)
    is_test_order = Boolean(default=False)
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True)
    email = String(required=True)
    error_code = String()
    error_description = String()
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderChargesUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    charges_total = Float(required=True)
    total_amount = Float(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String(required=True)
    email = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    amount = Float(required=True)
    refunded_at = DateTime(required=True)
