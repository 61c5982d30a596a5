"""Repository for the Product aggregate."""

from storefront.catalogue.product import Product, normalize_category, normalize_code
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_code(self, code: str) -> Product | None:
        results = self._dao.query.filter(code=normalize_code(code)).all().items
        return results[0] if results else None

    def newest_first(self, category: str | None = None, in_stock: bool | None = None) -> list[Product]:
        """Products matching the filters, newest first. ``category="all"`` disables the category filter."""
        query = self._dao.query
        if category and category.strip().lower() != "all":
            query = query.filter(category=normalize_category(category))
        if in_stock is not None:
            query = query.filter(in_stock=in_stock)
        return query.order_by("-created_at").all().items

    def delete_product(self, product: Product) -> None:
        self._dao.delete(product)
