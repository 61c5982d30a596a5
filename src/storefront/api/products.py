"""FastAPI endpoints for the product catalogue.

Writes upload to or delete from the image store, so they run in the threadpool.
"""

import json

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.api.schemas import (
    CreateProductRequest,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)
from storefront.catalogue.creation import CreateProduct
from storefront.catalogue.details import UpdateProduct
from storefront.catalogue.listing import (
    TRENDING_LIMIT,
    TRENDING_POOL,
    CatalogueListing,
    get_product,
    list_products,
    record_view,
    trending_products,
)
from storefront.catalogue.removal import DeleteProduct

product_router = APIRouter(prefix="/products", tags=["products"])


def _listing_response(listing: CatalogueListing) -> ProductListResponse:
    return ProductListResponse(
        products=[ProductResponse.from_product(item.product, item.final_price) for item in listing.products],
        rate_per_gram=listing.rate.price_per_gram,
        rate_captured_at=listing.rate.captured_at,
    )


@product_router.get("", response_model=ProductListResponse)
async def get_products(
    category: str | None = None,
    search: str | None = None,
    in_stock: bool | None = None,
) -> ProductListResponse:
    return _listing_response(list_products(category=category, search=search, in_stock=in_stock))


@product_router.get("/trending", response_model=ProductListResponse)
async def get_trending_products(limit: int = Query(TRENDING_LIMIT, ge=1, le=TRENDING_POOL)) -> ProductListResponse:
    return _listing_response(trending_products(limit=limit))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_single_product(product_id: str, background_tasks: BackgroundTasks) -> ProductResponse:
    priced = get_product(product_id)
    background_tasks.add_task(record_view, product_id)
    return ProductResponse.from_product(priced.product, priced.final_price)


@product_router.post("", status_code=201, response_model=ProductIdResponse)
def create_product(body: CreateProductRequest, _admin=Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        code=body.code,
        base_price=body.base_price,
        net_weight=body.net_weight,
        gross_weight=body.gross_weight,
        silver_weight=body.silver_weight,
        making_charge_rate=body.making_charge_rate,
        category=body.category,
        description=body.description,
        in_stock=body.in_stock,
        images=json.dumps([image.model_dump() for image in body.images]),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse)
def update_product(
    product_id: str, body: UpdateProductRequest, _admin=Depends(require_admin)
) -> StatusResponse:
    changes = body.model_dump(exclude_none=True, exclude={"images"})
    if body.images is not None:
        changes["images"] = json.dumps([image.model_dump() for image in body.images])
    current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
def delete_product(product_id: str, _admin=Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()
