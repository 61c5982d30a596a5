"""FastAPI endpoints for customer accounts, carts and wishlists."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import Identity, current_identity
from storefront.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CustomerIdResponse,
    ProductResponse,
    RegisterCustomerRequest,
    StatusResponse,
    UpdateCartItemRequest,
    WishlistRequest,
    WishlistResponse,
)
from storefront.customer.cart import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.customer.registration import RegisterCustomer
from storefront.customer.views import priced_cart, priced_wishlist
from storefront.customer.wishlist import AddToWishlist, RemoveFromWishlist

customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    command = RegisterCustomer(name=body.name, email=body.email, phone=body.phone)
    result = current_domain.process(command, asynchronous=False)
    return CustomerIdResponse(customer_id=result)


# --- Cart ---


@customer_router.get("/me/cart", response_model=CartResponse)
async def get_cart(identity: Identity = Depends(current_identity)) -> CartResponse:
    cart = priced_cart(identity.user_id)
    return CartResponse(
        items=[
            CartLineResponse(
                product=ProductResponse.from_product(line.product, line.unit_price),
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in cart.lines
        ],
        subtotal=cart.subtotal,
        rate_per_gram=cart.rate_per_gram,
    )


@customer_router.post("/me/cart", response_model=StatusResponse)
async def add_to_cart(body: AddToCartRequest, identity: Identity = Depends(current_identity)) -> StatusResponse:
    command = AddToCart(customer_id=identity.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@customer_router.put("/me/cart/{product_id}", response_model=StatusResponse)
async def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, identity: Identity = Depends(current_identity)
) -> StatusResponse:
    command = UpdateCartItem(customer_id=identity.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@customer_router.delete("/me/cart/{product_id}", response_model=StatusResponse)
async def remove_from_cart(product_id: str, identity: Identity = Depends(current_identity)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=identity.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@customer_router.delete("/me/cart", response_model=StatusResponse)
async def clear_cart(identity: Identity = Depends(current_identity)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=identity.user_id), asynchronous=False)
    return StatusResponse()


# --- Wishlist ---


@customer_router.get("/me/wishlist", response_model=WishlistResponse)
async def get_wishlist(identity: Identity = Depends(current_identity)) -> WishlistResponse:
    entries = priced_wishlist(identity.user_id)
    return WishlistResponse(
        products=[ProductResponse.from_product(entry.product, entry.final_price) for entry in entries]
    )


@customer_router.post("/me/wishlist", response_model=StatusResponse)
async def add_to_wishlist(body: WishlistRequest, identity: Identity = Depends(current_identity)) -> StatusResponse:
    current_domain.process(AddToWishlist(customer_id=identity.user_id, product_id=body.product_id), asynchronous=False)
    return StatusResponse()


@customer_router.delete("/me/wishlist/{product_id}", response_model=StatusResponse)
async def remove_from_wishlist(product_id: str, identity: Identity = Depends(current_identity)) -> StatusResponse:
    current_domain.process(RemoveFromWishlist(customer_id=identity.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()
