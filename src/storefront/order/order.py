"""Order aggregate with line items, additional charges and payment record.

State Machine (payment_status / order_status):
    pending/pending   -> completed/confirmed   (payment verification only)
    pending/pending   -> failed/cancelled      (payment failure report)
    confirmed -> processing -> shipped -> delivered   (admin)
    pending -> processing                             (admin, cash on delivery only)
    cod delivered: payment pending -> completed       (cash collected)
    any non-cancelled -> cancelled                    (admin force-cancel)
    completed -> refunded                             (admin)

Unit prices are frozen when the order is placed. ``total_amount`` is always
the composer's output for the stored subtotal, discount, delivery charge and
additional charges; the post-invariant rejects any state where it is not.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.order.events import (
    OrderChargesUpdated,
    OrderPaymentConfirmed,
    OrderPaymentFailed,
    OrderPlaced,
    OrderRefunded,
    OrderStatusChanged,
    PaymentIntentRecorded,
)
from storefront.order.totals import charges_total, compose, recompose
from storefront.pricing.engine import money


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    COD = "cod"
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"
    WALLET = "wallet"
    RAZORPAY = "razorpay"


# Forward moves an operator may make once the order is paid
_FULFILMENT_STEPS = {
    OrderStatus.CONFIRMED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

# Cash on delivery orders are never confirmed by the gateway
_COD_FULFILMENT_STEPS = {**_FULFILMENT_STEPS, OrderStatus.PENDING: OrderStatus.PROCESSING}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    country = String(max_length=100, default="India")
    zip_code = String(required=True, max_length=20)


@storefront.value_object(part_of="Order")
class CouponDetails:
    discount_type = String(max_length=20)
    discount_value = Float()
    applied_on = DateTime()


@storefront.value_object(part_of="Order")
class PaymentInfo:
    """Gateway correlation ids and outcome of the payment attempt."""

    gateway_order_id = String(max_length=100)
    gateway_payment_id = String(max_length=100)
    signature = String(max_length=255)
    method = String(max_length=50)
    amount_paid = Float()
    paid_at = DateTime()
    error_code = String(max_length=100)
    error_description = String(max_length=500)
    failed_at = DateTime()
    is_test_order = Boolean(default=False)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


@storefront.entity(part_of="Order")
class AdditionalCharge:
    name = String(required=True, max_length=100)
    amount = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier()  # Nullable for guest checkout
    customer_name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=20)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    additional_charges = HasMany(AdditionalCharge)
    delivery_charge = Float(default=0.0, min_value=0.0)
    subtotal = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    coupon_code = String(max_length=50)
    coupon_details = ValueObject(CouponDetails)
    total_amount = Float(default=0.0, min_value=0.0)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_info = ValueObject(PaymentInfo)
    gateway_order_id = String(max_length=100)
    tracking_number = String(max_length=100)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_amount_follows_composition(self):
        expected = recompose(
            self.subtotal or 0.0,
            self.discount or 0.0,
            self.delivery_charge or 0.0,
            self.additional_charges,
        ).total_amount
        if money(self.total_amount or 0.0) != expected:
            raise ValidationError({"total_amount": [f"Total {self.total_amount} does not match composed total {expected}"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if (self.discount or 0.0) > (self.subtotal or 0.0):
            raise ValidationError({"discount": ["Discount cannot exceed the subtotal"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_name,
        email,
        phone,
        shipping_address: ShippingAddress,
        payment_method,
        items: list[OrderItem],
        delivery_charge=0.0,
        additional_charges: list[AdditionalCharge] | None = None,
        discount=0.0,
        coupon_code=None,
        coupon_details: CouponDetails | None = None,
        customer_id=None,
        order_id=None,
    ):
        if not items:
            raise ValidationError({"items": ["Please provide at least one item"]})

        charges = additional_charges or []
        totals = compose(items, charges, delivery_charge or 0.0, discount or 0.0)
        now = datetime.now(UTC)

        fields = {
            "customer_id": customer_id,
            "customer_name": customer_name,
            "email": email,
            "phone": phone,
            "shipping_address": shipping_address,
            "items": items,
            "additional_charges": charges,
            "delivery_charge": delivery_charge or 0.0,
            "subtotal": totals.subtotal,
            "discount": discount or 0.0,
            "coupon_code": coupon_code,
            "coupon_details": coupon_details,
            "total_amount": totals.total_amount,
            "payment_method": payment_method,
            "payment_status": PaymentStatus.PENDING.value,
            "order_status": OrderStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        }
        if order_id:
            fields["id"] = order_id
        order = cls(**fields)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id) if customer_id else None,
                customer_name=order.customer_name,
                email=order.email,
                item_count=sum(item.quantity for item in items),
                subtotal=order.subtotal,
                discount=order.discount,
                total_amount=order.total_amount,
                coupon_code=coupon_code,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def awaiting_payment(self) -> bool:
        """Payment can only settle an order nobody has moved on yet."""
        return (
            self.payment_status == PaymentStatus.PENDING.value
            and self.order_status == OrderStatus.PENDING.value
        )

    def is_cash_on_delivery(self) -> bool:
        return self.payment_method == PaymentMethod.COD.value

    def belongs_to(self, customer_id) -> bool:
        return self.customer_id is not None and str(self.customer_id) == str(customer_id)

    def _assert_awaiting_payment(self) -> None:
        if not self.awaiting_payment():
            raise Conflict(
                "order_not_pending",
                f"Order {self.id} is not awaiting payment (payment {self.payment_status}, order {self.order_status})",
            )

    # -------------------------------------------------------------------
    # Payment lifecycle
    # -------------------------------------------------------------------
    def record_payment_intent(self, gateway_order_id: str, amount_minor: int, currency: str) -> None:
        self._assert_awaiting_payment()
        self.gateway_order_id = gateway_order_id
        self.updated_at = datetime.now(UTC)
        self.raise_(
            PaymentIntentRecorded(
                order_id=str(self.id),
                gateway_order_id=gateway_order_id,
                amount_minor=amount_minor,
                currency=currency,
            )
        )

    def confirm_payment(self, payment_info: PaymentInfo) -> None:
        """Mark the order paid. Only the payment verification gate calls this."""
        self._assert_awaiting_payment()
        now = datetime.now(UTC)

        with atomic_change(self):
            self.payment_info = payment_info
            self.payment_status = PaymentStatus.COMPLETED.value
            self.order_status = OrderStatus.CONFIRMED.value
            self.updated_at = now

        self.raise_(
            OrderPaymentConfirmed(
                order_id=str(self.id),
                customer_name=self.customer_name,
                email=self.email,
                gateway_payment_id=payment_info.gateway_payment_id,
                payment_method=payment_info.method,
                amount_paid=payment_info.amount_paid or 0.0,
                is_test_order=bool(payment_info.is_test_order),
                confirmed_at=now,
            )
        )

    def fail_payment(self, error_code: str | None, error_description: str | None) -> None:
        self._assert_awaiting_payment()
        now = datetime.now(UTC)

        with atomic_change(self):
            self.payment_info = PaymentInfo(
                gateway_order_id=self.gateway_order_id,
                error_code=error_code,
                error_description=error_description or "Payment failed",
                failed_at=now,
            )
            self.payment_status = PaymentStatus.FAILED.value
            self.order_status = OrderStatus.CANCELLED.value
            self.updated_at = now

        self.raise_(
            OrderPaymentFailed(
                order_id=str(self.id),
                customer_name=self.customer_name,
                email=self.email,
                error_code=error_code,
                error_description=error_description or "Payment failed",
                failed_at=now,
            )
        )

    def mark_refunded(self) -> None:
        if self.payment_status != PaymentStatus.COMPLETED.value:
            raise Conflict("payment_not_refundable", f"Only completed payments can be refunded, not {self.payment_status}")

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.REFUNDED.value
        self.updated_at = now
        self.raise_(OrderRefunded(order_id=str(self.id), amount=self.total_amount, refunded_at=now))

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def replace_additional_charges(self, charges: list[AdditionalCharge]) -> None:
        """Swap the extra charges and recompute the total from stored figures."""
        now = datetime.now(UTC)
        with atomic_change(self):
            for charge in list(self.additional_charges):
                self.remove_additional_charges(charge)
            for charge in charges:
                self.add_additional_charges(charge)
            totals = recompose(self.subtotal, self.discount, self.delivery_charge, charges)
            self.total_amount = totals.total_amount
            self.updated_at = now

        self.raise_(
            OrderChargesUpdated(
                order_id=str(self.id),
                charges_total=float(charges_total(charges)),
                total_amount=self.total_amount,
                updated_at=now,
            )
        )

    def change_status(self, new_status: str) -> None:
        """Advance fulfilment by one step, or force-cancel."""
        current = OrderStatus(self.order_status)
        target = OrderStatus(new_status)
        steps = _COD_FULFILMENT_STEPS if self.is_cash_on_delivery() else _FULFILMENT_STEPS

        if target == OrderStatus.CANCELLED:
            if current == OrderStatus.CANCELLED:
                raise Conflict("invalid_status_transition", "Order is already cancelled")
        elif steps.get(current) != target:
            raise Conflict(
                "invalid_status_transition",
                f"Cannot move order from {current.value} to {target.value}",
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.order_status = target.value
            self.updated_at = now
            if (
                target == OrderStatus.DELIVERED
                and self.is_cash_on_delivery()
                and self.payment_status == PaymentStatus.PENDING.value
            ):
                self.payment_status = PaymentStatus.COMPLETED.value
                self.payment_info = PaymentInfo(method=PaymentMethod.COD.value, amount_paid=self.total_amount, paid_at=now)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                customer_name=self.customer_name,
                email=self.email,
                previous_status=current.value,
                new_status=target.value,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def annotate(self, tracking_number: str | None = None, notes: str | None = None) -> None:
        with atomic_change(self):
            if tracking_number is not None:
                self.tracking_number = tracking_number
            if notes is not None:
                self.notes = notes
            self.updated_at = datetime.now(UTC)
