"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.order.order import Order, OrderStatus, PaymentStatus


@storefront.repository(part_of=Order)
class OrderRepository:
    def newest_first(self) -> list[Order]:
        return self._dao.query.order_by("-created_at").all().items

    def for_customer(self, customer_id) -> list[Order]:
        return self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").all().items

    def commit_payment(self, order: Order) -> None:
        """Persist a payment transition only while the stored order is still pending.

        Two verifications racing on the same order both read it as pending;
        only the first write passes this check. An order an operator has
        already cancelled or started fulfilling fails it too.
        """
        still_pending = (
            self._dao.query.filter(
                id=order.id,
                payment_status=PaymentStatus.PENDING.value,
                order_status=OrderStatus.PENDING.value,
            )
            .all()
            .items
        )
        if not still_pending:
            raise Conflict("order_not_pending", f"Order {order.id} is no longer awaiting payment")
        self.add(order)
