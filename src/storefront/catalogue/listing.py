"""Catalogue reads. Every product is priced at the latest silver rate."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.pricing.rate import CommodityRate
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)

TRENDING_LIMIT = 35
TRENDING_POOL = 60
RECENCY_WINDOW = timedelta(days=30)
RECENCY_BOOST = 10


@dataclass(frozen=True)
class PricedProduct:
    product: Product
    final_price: float


@dataclass(frozen=True)
class CatalogueListing:
    products: list[PricedProduct]
    rate: CommodityRate


def _matches(product: Product, term: str) -> bool:
    return term in (product.name or "").lower() or term in (product.code or "").lower()


def list_products(category: str | None = None, search: str | None = None, in_stock: bool | None = None) -> CatalogueListing:
    """Newest products first, optionally filtered by category, stock and a search term."""
    rate = current_domain.repository_for(CommodityRate).latest()
    products = current_domain.repository_for(Product).newest_first(category=category, in_stock=in_stock)

    if search and search.strip():
        term = search.strip().lower()
        products = [product for product in products if _matches(product, term)]

    return CatalogueListing(
        products=[PricedProduct(product, product.final_price(rate.price_per_gram)) for product in products],
        rate=rate,
    )


def trending_score(product: Product, now: datetime) -> int:
    """Views, plus six per unit ordered and three per wishlist, plus a boost for new arrivals."""
    created_at = product.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    boost = RECENCY_BOOST if created_at is not None and created_at >= now - RECENCY_WINDOW else 0
    return (product.view_count or 0) + 6 * (product.order_count or 0) + 3 * (product.wishlist_count or 0) + boost


def trending_products(limit: int = TRENDING_LIMIT) -> CatalogueListing:
    """Highest scoring products first, newest first among equal scores."""
    rate = current_domain.repository_for(CommodityRate).latest()
    now = datetime.now(UTC)
    products = sorted(
        current_domain.repository_for(Product).newest_first(),
        key=lambda product: trending_score(product, now),
        reverse=True,
    )
    return CatalogueListing(
        products=[
            PricedProduct(product, product.final_price(rate.price_per_gram))
            for product in products[: min(limit, TRENDING_POOL)]
        ],
        rate=rate,
    )


def get_product(product_id: str) -> PricedProduct:
    product = load(Product, product_id)
    rate = current_domain.repository_for(CommodityRate).latest()
    return PricedProduct(product, product.final_price(rate.price_per_gram))


def record_view(product_id: str) -> None:
    """Bump the view counter. Runs after the response; never raises."""
    try:
        with storefront.domain_context():
            repo = current_domain.repository_for(Product)
            product = repo.get(product_id)
            product.record_view()
            repo.add(product)
    except Exception:
        logger.warning("product_view_not_recorded", product_id=product_id, exc_info=True)
