"""Priced cart and wishlist views.

Lines are priced with the latest silver rate on every read, and the cart
subtotal goes through the order total composer so it matches what placing
the order would charge. Products deleted since they were added are skipped.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.order.totals import compose
from storefront.pricing.engine import money
from storefront.pricing.rate import CommodityRate
from storefront.utils.lookup import load


@dataclass(frozen=True)
class CartLine:
    product: Product
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class PricedCart:
    lines: list[CartLine]
    subtotal: float
    rate_per_gram: float


@dataclass(frozen=True)
class WishlistEntry:
    product: Product
    final_price: float


def _products_by_id(product_ids) -> dict:
    repo = current_domain.repository_for(Product)
    found = {}
    for product_id in product_ids:
        try:
            found[str(product_id)] = repo.get(product_id)
        except ObjectNotFoundError:
            continue
    return found


def priced_cart(customer_id: str) -> PricedCart:
    customer = load(Customer, customer_id)
    rate = current_domain.repository_for(CommodityRate).latest()
    products = _products_by_id(item.product_id for item in customer.cart)

    lines = [
        CartLine(
            product=products[str(item.product_id)],
            quantity=item.quantity,
            unit_price=products[str(item.product_id)].final_price(rate.price_per_gram),
        )
        for item in customer.cart
        if str(item.product_id) in products
    ]
    return PricedCart(lines=lines, subtotal=compose(lines).subtotal, rate_per_gram=rate.price_per_gram)


def priced_wishlist(customer_id: str) -> list[WishlistEntry]:
    customer = load(Customer, customer_id)
    rate = current_domain.repository_for(CommodityRate).latest()
    products = _products_by_id(customer.wishlist_ids())
    return [
        WishlistEntry(product=product, final_price=product.final_price(rate.price_per_gram))
        for product in products.values()
    ]
