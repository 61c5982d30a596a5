"""Pydantic request/response schemas for the storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Shared ---


class StatusResponse(BaseModel):
    status: str = "ok"


class ImageUpload(BaseModel):
    filename: str = Field(..., max_length=255)
    content: str = Field(..., description="Base64-encoded file content")


# --- Products ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Oxidised Silver Jhumka",
                    "code": "ER-101",
                    "base_price": 200.0,
                    "net_weight": 10.0,
                    "gross_weight": 11.2,
                    "silver_weight": 9.25,
                    "making_charge_rate": 20.0,
                    "category": "earrings",
                    "description": "Hand-finished temple jhumkas.",
                    "in_stock": True,
                    "images": [{"filename": "front.jpg", "content": "aGVsbG8="}],
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    code: str = Field(..., max_length=50)
    base_price: float = Field(..., ge=0)
    net_weight: float = Field(0.0, ge=0)
    gross_weight: float = Field(0.0, ge=0)
    silver_weight: float = Field(0.0, ge=0)
    making_charge_rate: float = Field(0.0, ge=0)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    in_stock: bool = True
    images: list[ImageUpload] = Field(..., min_length=1, max_length=5)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    code: str | None = Field(None, max_length=50)
    base_price: float | None = Field(None, ge=0)
    net_weight: float | None = Field(None, ge=0)
    gross_weight: float | None = Field(None, ge=0)
    silver_weight: float | None = Field(None, ge=0)
    making_charge_rate: float | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    in_stock: bool | None = None
    images: list[ImageUpload] | None = Field(None, min_length=1, max_length=5)


class ProductIdResponse(BaseModel):
    product_id: str


class WeightResponse(BaseModel):
    net_weight: float = 0.0
    gross_weight: float = 0.0
    silver_weight: float = 0.0


class ProductResponse(BaseModel):
    id: str
    name: str
    code: str
    base_price: float
    final_price: float
    weight: WeightResponse
    making_charge_rate: float
    category: str | None = None
    description: str | None = None
    in_stock: bool
    images: list[str]
    view_count: int = 0
    order_count: int = 0
    wishlist_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product, final_price: float) -> ProductResponse:
        weight = product.weight
        return cls(
            id=str(product.id),
            name=product.name,
            code=product.code,
            base_price=product.base_price,
            final_price=final_price,
            weight=WeightResponse(
                net_weight=weight.net_weight if weight else 0.0,
                gross_weight=weight.gross_weight if weight else 0.0,
                silver_weight=weight.silver_weight if weight else 0.0,
            ),
            making_charge_rate=product.making_charge_rate or 0.0,
            category=product.category,
            description=product.description,
            in_stock=bool(product.in_stock),
            images=product.image_urls(),
            view_count=product.view_count or 0,
            order_count=product.order_count or 0,
            wishlist_count=product.wishlist_count or 0,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    rate_per_gram: float
    rate_captured_at: datetime | None = None


# --- Commodity rates ---


class RecordRateRequest(BaseModel):
    price_per_gram: float = Field(..., gt=0)


class RateResponse(BaseModel):
    id: str
    price_per_gram: float
    currency: str
    source: str
    captured_at: datetime | None = None


class RateIdResponse(BaseModel):
    rate_id: str


# --- Customers, cart and wishlist ---


class RegisterCustomerRequest(BaseModel):
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=20)


class CustomerIdResponse(BaseModel):
    customer_id: str


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartLineResponse(BaseModel):
    product: ProductResponse
    quantity: int
    unit_price: float
    line_total: float


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    subtotal: float
    rate_per_gram: float


class WishlistRequest(BaseModel):
    product_id: str


class WishlistResponse(BaseModel):
    products: list[ProductResponse]


# --- Coupons ---


class CreateCouponRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "DIWALI10",
                    "discount_type": "percentage",
                    "discount_value": 10,
                    "min_order_amount": 1000,
                    "max_discount": 500,
                    "expires_at": "2026-11-30T23:59:59Z",
                    "usage_limit": 100,
                    "description": "Festive season offer",
                }
            ]
        }
    }

    code: str = Field(..., max_length=50)
    discount_type: str
    discount_value: float = Field(..., ge=0)
    min_order_amount: float = Field(0.0, ge=0)
    max_discount: float | None = Field(None, ge=0)
    expires_at: datetime
    usage_limit: int | None = Field(None, ge=1)
    description: str | None = None


class UpdateCouponRequest(BaseModel):
    discount_type: str | None = None
    discount_value: float | None = Field(None, ge=0)
    min_order_amount: float | None = Field(None, ge=0)
    max_discount: float | None = Field(None, ge=0)
    expires_at: datetime | None = None
    usage_limit: int | None = Field(None, ge=1)
    description: str | None = None
    is_active: bool | None = None


class CouponIdResponse(BaseModel):
    coupon_id: str


class CouponResponse(BaseModel):
    id: str
    code: str
    discount_type: str
    discount_value: float
    min_order_amount: float
    max_discount: float | None = None
    expires_at: datetime | None = None
    is_active: bool
    usage_limit: int | None = None
    used_count: int
    description: str | None = None


class ValidateCouponRequest(BaseModel):
    code: str = Field(..., max_length=50)
    subtotal: float = Field(..., ge=0)


class CouponQuoteResponse(BaseModel):
    code: str
    discount: float
    discount_type: str
    discount_value: float


class ToggleCouponResponse(BaseModel):
    is_active: bool


# --- Orders ---


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class ChargeRequest(BaseModel):
    name: str = Field(..., max_length=100)
    amount: float = Field(..., ge=0)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "Asha Rao",
                    "email": "asha@example.com",
                    "phone": "9876543210",
                    "address": "12 MG Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "country": "India",
                    "zip_code": "560001",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "payment_method": "razorpay",
                    "delivery_charge": 50,
                    "coupon_code": "DIWALI10",
                }
            ]
        }
    }

    customer_name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)
    phone: str = Field(..., max_length=20)
    address: str = Field(..., max_length=500)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    country: str = Field("India", max_length=100)
    zip_code: str = Field(..., max_length=20)
    items: list[OrderLineRequest] = Field(..., min_length=1)
    payment_method: str
    delivery_charge: float = Field(0.0, ge=0)
    additional_charges: list[ChargeRequest] = Field(default_factory=list)
    coupon_code: str | None = Field(None, max_length=50)


class PlaceOrderResponse(BaseModel):
    order_id: str
    total_amount: float


class UpdateChargesRequest(BaseModel):
    additional_charges: list[ChargeRequest]


class ChangeStatusRequest(BaseModel):
    order_status: str


class AnnotateOrderRequest(BaseModel):
    tracking_number: str | None = Field(None, max_length=100)
    notes: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float


class ChargeResponse(BaseModel):
    name: str
    amount: float


class ShippingAddressResponse(BaseModel):
    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    zip_code: str | None = None


class PaymentInfoResponse(BaseModel):
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    method: str | None = None
    amount_paid: float | None = None
    paid_at: datetime | None = None
    error_code: str | None = None
    error_description: str | None = None
    failed_at: datetime | None = None
    is_test_order: bool = False


class OrderResponse(BaseModel):
    id: str
    customer_id: str | None = None
    customer_name: str
    email: str
    phone: str
    shipping_address: ShippingAddressResponse | None = None
    items: list[OrderItemResponse]
    additional_charges: list[ChargeResponse]
    delivery_charge: float
    subtotal: float
    discount: float
    coupon_code: str | None = None
    total_amount: float
    payment_method: str
    payment_status: str
    order_status: str
    payment_info: PaymentInfoResponse | None = None
    gateway_order_id: str | None = None
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderTotalResponse(BaseModel):
    total_amount: float


# --- Payments ---


class CreateIntentRequest(BaseModel):
    order_id: str


class PaymentIntentResponse(BaseModel):
    gateway_order_id: str
    amount: int
    currency: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    order_id: str
    gateway_order_id: str
    gateway_payment_id: str
    signature: str | None = None


class VerifyPaymentResponse(BaseModel):
    order_id: str
    payment_status: str
    order_status: str
    is_test_order: bool = False


class PaymentFailureRequest(BaseModel):
    order_id: str
    error_code: str | None = None
    error_description: str | None = None
