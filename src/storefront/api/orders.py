"""FastAPI endpoints for placing, reading and administering orders.

Writes raise events whose notifications go out over blocking HTTP and SMTP
when events are processed synchronously, so those routes are plain functions
that FastAPI runs in its threadpool.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Identity, current_identity, optional_identity, require_admin
from storefront.api.schemas import (
    AnnotateOrderRequest,
    ChangeStatusRequest,
    ChargeResponse,
    OrderItemResponse,
    OrderResponse,
    OrderTotalResponse,
    PaymentInfoResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ShippingAddressResponse,
    StatusResponse,
    UpdateChargesRequest,
)
from storefront.order.administration import AnnotateOrder, ChangeOrderStatus, MarkOrderRefunded, UpdateOrderCharges
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.queries import get_order, list_orders

order_router = APIRouter(prefix="/orders", tags=["orders"])


def order_response(order: Order) -> OrderResponse:
    address = order.shipping_address
    info = order.payment_info
    return OrderResponse(
        id=str(order.id),
        customer_id=str(order.customer_id) if order.customer_id else None,
        customer_name=order.customer_name,
        email=order.email,
        phone=order.phone,
        shipping_address=ShippingAddressResponse(
            address=address.address,
            city=address.city,
            state=address.state,
            country=address.country,
            zip_code=address.zip_code,
        )
        if address
        else None,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        additional_charges=[
            ChargeResponse(name=charge.name, amount=charge.amount) for charge in order.additional_charges
        ],
        delivery_charge=order.delivery_charge or 0.0,
        subtotal=order.subtotal,
        discount=order.discount or 0.0,
        coupon_code=order.coupon_code,
        total_amount=order.total_amount,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        order_status=order.order_status,
        payment_info=PaymentInfoResponse(
            gateway_order_id=info.gateway_order_id,
            gateway_payment_id=info.gateway_payment_id,
            method=info.method,
            amount_paid=info.amount_paid,
            paid_at=info.paid_at,
            error_code=info.error_code,
            error_description=info.error_description,
            failed_at=info.failed_at,
            is_test_order=bool(info.is_test_order),
        )
        if info
        else None,
        gateway_order_id=order.gateway_order_id,
        tracking_number=order.tracking_number,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
def place_order(
    body: PlaceOrderRequest, identity: Identity | None = Depends(optional_identity)
) -> PlaceOrderResponse:
    command = PlaceOrder(
        customer_id=identity.user_id if identity else None,
        customer_name=body.customer_name,
        email=body.email,
        phone=body.phone,
        address=body.address,
        city=body.city,
        state=body.state,
        country=body.country,
        zip_code=body.zip_code,
        items=json.dumps([line.model_dump() for line in body.items]),
        payment_method=body.payment_method,
        delivery_charge=body.delivery_charge,
        additional_charges=json.dumps([charge.model_dump() for charge in body.additional_charges]),
        coupon_code=body.coupon_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return PlaceOrderResponse(order_id=order_id, total_amount=order.total_amount)


@order_router.get("", response_model=list[OrderResponse])
async def get_orders(identity: Identity = Depends(current_identity)) -> list[OrderResponse]:
    return [order_response(order) for order in list_orders(identity.user_id, identity.is_admin)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_single_order(order_id: str, identity: Identity = Depends(current_identity)) -> OrderResponse:
    return order_response(get_order(order_id, identity.user_id, identity.is_admin))


@order_router.put("/{order_id}/charges", response_model=OrderTotalResponse)
def update_charges(
    order_id: str, body: UpdateChargesRequest, _admin=Depends(require_admin)
) -> OrderTotalResponse:
    command = UpdateOrderCharges(
        order_id=order_id,
        additional_charges=json.dumps([charge.model_dump() for charge in body.additional_charges]),
    )
    total_amount = current_domain.process(command, asynchronous=False)
    return OrderTotalResponse(total_amount=total_amount)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
def change_status(order_id: str, body: ChangeStatusRequest, _admin=Depends(require_admin)) -> StatusResponse:
    current_domain.process(ChangeOrderStatus(order_id=order_id, order_status=body.order_status), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/tracking", response_model=StatusResponse)
def annotate_order(
    order_id: str, body: AnnotateOrderRequest, _admin=Depends(require_admin)
) -> StatusResponse:
    command = AnnotateOrder(order_id=order_id, tracking_number=body.tracking_number, notes=body.notes)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/refund", response_model=StatusResponse)
def mark_refunded(order_id: str, _admin=Depends(require_admin)) -> StatusResponse:
    current_domain.process(MarkOrderRefunded(order_id=order_id), asynchronous=False)
    return StatusResponse()
