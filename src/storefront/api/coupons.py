"""FastAPI endpoints for coupons."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.api.schemas import (
    CouponIdResponse,
    CouponQuoteResponse,
    CouponResponse,
    CreateCouponRequest,
    StatusResponse,
    ToggleCouponResponse,
    UpdateCouponRequest,
    ValidateCouponRequest,
)
from storefront.coupon.coupon import Coupon
from storefront.coupon.management import CreateCoupon, DeleteCoupon, ToggleCoupon, UpdateCoupon
from storefront.coupon.validation import validate_coupon

coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


def coupon_response(coupon: Coupon) -> CouponResponse:
    return CouponResponse(
        id=str(coupon.id),
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        min_order_amount=coupon.min_order_amount or 0.0,
        max_discount=coupon.max_discount,
        expires_at=coupon.expires_at,
        is_active=bool(coupon.is_active),
        usage_limit=coupon.usage_limit,
        used_count=coupon.used_count or 0,
        description=coupon.description,
    )


@coupon_router.post("/validate", response_model=CouponQuoteResponse)
async def validate(body: ValidateCouponRequest) -> CouponQuoteResponse:
    quote = validate_coupon(body.code, body.subtotal)
    return CouponQuoteResponse(
        code=quote.code,
        discount=quote.discount,
        discount_type=quote.discount_type,
        discount_value=quote.discount_value,
    )


@coupon_router.get("/active", response_model=list[CouponResponse])
async def active_coupons() -> list[CouponResponse]:
    return [coupon_response(coupon) for coupon in current_domain.repository_for(Coupon).live(datetime.now(UTC))]


@coupon_router.get("", response_model=list[CouponResponse])
async def all_coupons(_admin=Depends(require_admin)) -> list[CouponResponse]:
    return [coupon_response(coupon) for coupon in current_domain.repository_for(Coupon).newest_first()]


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest, _admin=Depends(require_admin)) -> CouponIdResponse:
    result = current_domain.process(CreateCoupon(**body.model_dump()), asynchronous=False)
    return CouponIdResponse(coupon_id=result)


@coupon_router.put("/{coupon_id}", response_model=StatusResponse)
async def update_coupon(coupon_id: str, body: UpdateCouponRequest, _admin=Depends(require_admin)) -> StatusResponse:
    command = UpdateCoupon(coupon_id=coupon_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@coupon_router.patch("/{coupon_id}/toggle", response_model=ToggleCouponResponse)
async def toggle_coupon(coupon_id: str, _admin=Depends(require_admin)) -> ToggleCouponResponse:
    is_active = current_domain.process(ToggleCoupon(coupon_id=coupon_id), asynchronous=False)
    return ToggleCouponResponse(is_active=is_active)


@coupon_router.delete("/{coupon_id}", response_model=StatusResponse)
async def delete_coupon(coupon_id: str, _admin=Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeleteCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()
