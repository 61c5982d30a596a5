"""Order placement: command and handler.

Unit prices come from the pricing engine at the latest commodity rate, never
from the client. A coupon code is redeemed in the same unit of work as the
order, so a failed placement never consumes a coupon use.
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.coupon.validation import redeem_coupon
from storefront.domain import storefront
from storefront.order.order import (
    AdditionalCharge,
    CouponDetails,
    Order,
    OrderItem,
    PaymentMethod,
    ShippingAddress,
)
from storefront.order.totals import compose
from storefront.pricing.rate import CommodityRate
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier()
    customer_name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    country = String(max_length=100, default="India")
    zip_code = String(required=True, max_length=20)
    items = Text(required=True)  # JSON array of {"product_id", "quantity"}
    payment_method = String(required=True, choices=PaymentMethod)
    delivery_charge = Float(default=0.0, min_value=0.0)
    additional_charges = Text()  # JSON array of {"name", "amount"}
    coupon_code = String(max_length=50)


def parse_lines(payload: str) -> list[tuple[str, int]]:
    try:
        lines = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"items": ["Items must be a JSON array"]}) from exc

    if not isinstance(lines, list) or not lines:
        raise ValidationError({"items": ["Please provide at least one item"]})

    parsed = []
    for line in lines:
        if not isinstance(line, dict) or not line.get("product_id"):
            raise ValidationError({"items": ["Each item needs a product_id"]})
        quantity = line.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": [f"Invalid quantity for product {line['product_id']}"]})
        parsed.append((str(line["product_id"]), quantity))
    return parsed


def parse_charges(payload: str | None) -> list[AdditionalCharge]:
    if not payload:
        return []
    try:
        charges = json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"additional_charges": ["Charges must be a JSON array"]}) from exc

    if not isinstance(charges, list) or not all(isinstance(charge, dict) for charge in charges):
        raise ValidationError({"additional_charges": ["Charges must be a JSON array"]})
    return [AdditionalCharge(name=charge.get("name"), amount=charge.get("amount")) for charge in charges]


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        rate = current_domain.repository_for(CommodityRate).latest()
        product_repo = current_domain.repository_for(Product)

        ordered: dict[str, tuple[Product, int]] = {}
        items = []
        for product_id, quantity in parse_lines(command.items):
            product, counted = ordered.get(product_id, (None, 0))
            if product is None:
                product = load(Product, product_id)
            if not product.in_stock:
                raise ValidationError({"items": [f"Product {product.name} is out of stock"]})
            ordered[product_id] = (product, counted + quantity)
            items.append(
                OrderItem(
                    product_id=str(product.id),
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.final_price(rate.price_per_gram),
                )
            )

        order_id = str(uuid4())
        discount = 0.0
        coupon_code = None
        coupon_details = None
        if command.coupon_code:
            quote = redeem_coupon(command.coupon_code, compose(items).subtotal, order_id=order_id)
            discount = quote.discount
            coupon_code = quote.code
            coupon_details = CouponDetails(
                discount_type=quote.discount_type,
                discount_value=quote.discount_value,
                applied_on=datetime.now(UTC),
            )

        order = Order.place(
            order_id=order_id,
            customer_id=command.customer_id,
            customer_name=command.customer_name,
            email=command.email,
            phone=command.phone,
            shipping_address=ShippingAddress(
                address=command.address,
                city=command.city,
                state=command.state,
                country=command.country or "India",
                zip_code=command.zip_code,
            ),
            payment_method=command.payment_method,
            items=items,
            delivery_charge=command.delivery_charge or 0.0,
            additional_charges=parse_charges(command.additional_charges),
            discount=discount,
            coupon_code=coupon_code,
            coupon_details=coupon_details,
        )
        current_domain.repository_for(Order).add(order)

        for product, quantity in ordered.values():
            product.record_order(quantity)
            product_repo.add(product)

        logger.info(
            "order_placed",
            order_id=order_id,
            total_amount=order.total_amount,
            item_count=len(items),
            coupon_code=coupon_code,
        )
        return order_id
