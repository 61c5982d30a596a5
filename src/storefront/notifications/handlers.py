"""Order event handler that fans events out to notification channels."""

from protean.utils.mixins import handle

from storefront.domain import storefront
from storefront.notifications.dispatch import notify
from storefront.order.events import OrderPaymentConfirmed, OrderPaymentFailed, OrderPlaced, OrderStatusChanged
from storefront.order.order import Order


@storefront.event_handler(part_of=Order)
class OrderNotificationsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify(
            "order_placed",
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "email": event.email,
                "item_count": event.item_count,
                "total_amount": event.total_amount,
                "discount": event.discount,
                "coupon_code": event.coupon_code,
                "payment_method": event.payment_method,
            },
        )

    @handle(OrderPaymentConfirmed)
    def on_payment_confirmed(self, event: OrderPaymentConfirmed) -> None:
        notify(
            "payment_confirmed",
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "email": event.email,
                "amount_paid": event.amount_paid,
                "payment_method": event.payment_method,
                "is_test_order": event.is_test_order,
            },
        )

    @handle(OrderPaymentFailed)
    def on_payment_failed(self, event: OrderPaymentFailed) -> None:
        notify(
            "payment_failed",
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "email": event.email,
                "error_code": event.error_code,
                "error_description": event.error_description,
            },
        )

    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        notify(
            "order_status_changed",
            {
                "order_id": str(event.order_id),
                "customer_name": event.customer_name,
                "email": event.email,
                "previous_status": event.previous_status,
                "new_status": event.new_status,
                "tracking_number": event.tracking_number,
            },
        )
