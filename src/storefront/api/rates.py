"""FastAPI endpoints for the silver rate."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.api.schemas import RateIdResponse, RateResponse, RecordRateRequest
from storefront.pricing.rate import DEFAULT_HISTORY_LIMIT, CommodityRate, RateSource
from storefront.pricing.recording import RecordCommodityRate
from storefront.pricing.refresh import RefreshCommodityRate

rate_router = APIRouter(prefix="/rates", tags=["rates"])


def rate_response(rate: CommodityRate) -> RateResponse:
    return RateResponse(
        id=str(rate.id),
        price_per_gram=rate.price_per_gram,
        currency=rate.currency,
        source=rate.source,
        captured_at=rate.captured_at,
    )


@rate_router.get("/current", response_model=RateResponse)
async def current_rate() -> RateResponse:
    return rate_response(current_domain.repository_for(CommodityRate).latest())


@rate_router.get("/history", response_model=list[RateResponse])
async def rate_history(
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=365), _admin=Depends(require_admin)
) -> list[RateResponse]:
    return [rate_response(rate) for rate in current_domain.repository_for(CommodityRate).history(limit=limit)]


@rate_router.post("", status_code=201, response_model=RateIdResponse)
async def record_rate(body: RecordRateRequest, _admin=Depends(require_admin)) -> RateIdResponse:
    command = RecordCommodityRate(price_per_gram=body.price_per_gram, source=RateSource.MANUAL.value)
    result = current_domain.process(command, asynchronous=False)
    return RateIdResponse(rate_id=result)


# Blocks on the rate provider; runs in the threadpool
@rate_router.post("/refresh", status_code=201, response_model=RateIdResponse)
def refresh_rate(_admin=Depends(require_admin)) -> RateIdResponse:
    result = current_domain.process(RefreshCommodityRate(), asynchronous=False)
    return RateIdResponse(rate_id=result)
