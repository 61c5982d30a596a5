"""Operator edits to placed orders: charges, status, tracking and refunds."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.order.placement import parse_charges
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderCharges:
    order_id = Identifier(required=True)
    additional_charges = Text(required=True)  # JSON array of {"name", "amount"}


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    order_status = String(required=True, choices=OrderStatus)


@storefront.command(part_of="Order")
class AnnotateOrder:
    order_id = Identifier(required=True)
    tracking_number = String(max_length=100)
    notes = Text()


@storefront.command(part_of="Order")
class MarkOrderRefunded:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class AdministerOrderHandler:
    @handle(UpdateOrderCharges)
    def update_charges(self, command):
        order = load(Order, command.order_id, "order_not_found")
        order.replace_additional_charges(parse_charges(command.additional_charges))
        current_domain.repository_for(Order).add(order)

        logger.info("order_charges_updated", order_id=str(order.id), total_amount=order.total_amount)
        return order.total_amount

    @handle(ChangeOrderStatus)
    def change_status(self, command):
        order = load(Order, command.order_id, "order_not_found")
        order.change_status(command.order_status)
        current_domain.repository_for(Order).add(order)

        logger.info("order_status_changed", order_id=str(order.id), order_status=order.order_status)

    @handle(AnnotateOrder)
    def annotate(self, command):
        order = load(Order, command.order_id, "order_not_found")
        order.annotate(tracking_number=command.tracking_number, notes=command.notes)
        current_domain.repository_for(Order).add(order)

    @handle(MarkOrderRefunded)
    def mark_refunded(self, command):
        order = load(Order, command.order_id, "order_not_found")
        order.mark_refunded()
        current_domain.repository_for(Order).add(order)

        logger.info("order_refunded", order_id=str(order.id), amount=order.total_amount)
