"""Read access to orders, scoped to the requester."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import AccessDenied
from storefront.order.order import Order
from storefront.utils.lookup import load


def list_orders(requester_id, is_admin: bool) -> list[Order]:
    repo = current_domain.repository_for(Order)
    if is_admin:
        return repo.newest_first()
    return repo.for_customer(requester_id)


def get_order(order_id, requester_id, is_admin: bool) -> Order:
    order = load(Order, order_id, "order_not_found")
    if not is_admin and not order.belongs_to(requester_id):
        raise AccessDenied("forbidden", "You can only view your own orders")
    return order


def payable_by(order_id, requester_id, is_admin: bool) -> Order | None:
    """The order if the requester may pay for it; None when it does not exist."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        return None
    if not is_admin and not order.belongs_to(requester_id):
        raise AccessDenied("forbidden", "You can only pay for your own orders")
    return order
