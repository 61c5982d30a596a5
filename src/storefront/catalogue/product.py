"""Product aggregate with its weight value object and image entities.

A product is priced either by weight (its net silver weight follows the live
rate) or flat (base price only). ``stored_final_price`` is a snapshot taken
at the last write; readers price weighted products afresh through
``final_price``.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text, ValueObject

from storefront.catalogue.events import ProductCreated, ProductUpdated
from storefront.domain import storefront
from storefront.pricing.engine import Flat, PricingMode, Weighted, price_of

MIN_IMAGES = 1
MAX_IMAGES = 5

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def normalize_category(category: str | None) -> str:
    return (category or "general").strip().lower()


@storefront.value_object(part_of="Product")
class ProductWeight:
    """Weights in grams. Only the net weight takes part in pricing."""

    net_weight = Float(default=0.0, min_value=0.0)
    gross_weight = Float(default=0.0, min_value=0.0)
    silver_weight = Float(default=0.0, min_value=0.0)


@storefront.entity(part_of="Product")
class ProductImage:
    url = String(required=True, max_length=1000)
    display_order = Integer(default=0, min_value=0)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    base_price = Float(required=True, min_value=0.0)
    weight = ValueObject(ProductWeight)
    making_charge_rate = Float(default=0.0, min_value=0.0)
    stored_final_price = Float(default=0.0, min_value=0.0)
    category = String(max_length=100, default="general")
    description = Text()
    in_stock = Boolean(default=True)
    view_count = Integer(default=0, min_value=0)
    order_count = Integer(default=0, min_value=0)
    wishlist_count = Integer(default=0, min_value=0)
    images = HasMany(ProductImage)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > MAX_IMAGES:
            raise ValidationError({"images": [f"A product can have at most {MAX_IMAGES} images"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        code,
        base_price,
        image_urls,
        rate_per_gram,
        net_weight=0.0,
        gross_weight=0.0,
        silver_weight=0.0,
        making_charge_rate=0.0,
        category=None,
        description=None,
        in_stock=True,
    ):
        check_image_count(image_urls)
        if not normalize_code(code):
            raise ValidationError({"code": ["Product code is required"]})

        now = datetime.now(UTC)
        product = cls(
            name=(name or "").strip(),
            code=normalize_code(code),
            base_price=base_price,
            weight=ProductWeight(
                net_weight=net_weight or 0.0,
                gross_weight=gross_weight or 0.0,
                silver_weight=silver_weight or 0.0,
            ),
            making_charge_rate=making_charge_rate or 0.0,
            category=normalize_category(category),
            description=description,
            in_stock=in_stock,
            images=[ProductImage(url=url, display_order=index) for index, url in enumerate(image_urls)],
            created_at=now,
            updated_at=now,
        )
        product.refresh_price_snapshot(rate_per_gram)

        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                code=product.code,
                name=product.name,
                base_price=product.base_price,
                final_price=product.stored_final_price,
                category=product.category,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def pricing_mode(self) -> PricingMode:
        net_weight = self.weight.net_weight if self.weight else 0.0
        if net_weight and net_weight > 0:
            return Weighted(net_weight=net_weight, making_charge_rate=self.making_charge_rate or 0.0)
        return Flat()

    def final_price(self, rate_per_gram) -> float:
        """Sale price of this product at the given silver rate."""
        return price_of(self.base_price, self.pricing_mode(), rate_per_gram)

    def refresh_price_snapshot(self, rate_per_gram) -> None:
        self.stored_final_price = self.final_price(rate_per_gram)

    # -------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------
    def update_details(
        self,
        rate_per_gram,
        name=_UNSET,
        code=_UNSET,
        base_price=_UNSET,
        net_weight=_UNSET,
        gross_weight=_UNSET,
        silver_weight=_UNSET,
        making_charge_rate=_UNSET,
        category=_UNSET,
        description=_UNSET,
        in_stock=_UNSET,
    ):
        """Apply a partial update and re-take the price snapshot."""
        changed = []
        current_weight = self.weight or ProductWeight()
        weights = {
            "net_weight": current_weight.net_weight or 0.0,
            "gross_weight": current_weight.gross_weight or 0.0,
            "silver_weight": current_weight.silver_weight or 0.0,
        }

        with atomic_change(self):
            if name is not _UNSET and name is not None:
                self.name = name.strip()
                changed.append("name")
            if code is not _UNSET and code is not None:
                if not normalize_code(code):
                    raise ValidationError({"code": ["Product code is required"]})
                self.code = normalize_code(code)
                changed.append("code")
            if base_price is not _UNSET and base_price is not None:
                self.base_price = base_price
                changed.append("base_price")
            for field_name, value in (
                ("net_weight", net_weight),
                ("gross_weight", gross_weight),
                ("silver_weight", silver_weight),
            ):
                if value is not _UNSET and value is not None:
                    weights[field_name] = value
                    changed.append(field_name)
            self.weight = ProductWeight(**weights)
            if making_charge_rate is not _UNSET and making_charge_rate is not None:
                self.making_charge_rate = making_charge_rate
                changed.append("making_charge_rate")
            if category is not _UNSET and category is not None:
                self.category = normalize_category(category)
                changed.append("category")
            if description is not _UNSET:
                self.description = description
                changed.append("description")
            if in_stock is not _UNSET and in_stock is not None:
                self.in_stock = in_stock
                changed.append("in_stock")

            self.refresh_price_snapshot(rate_per_gram)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                changed_fields=",".join(changed),
                final_price=self.stored_final_price,
                updated_at=self.updated_at,
            )
        )

    def replace_images(self, image_urls) -> list[str]:
        """Swap the image set and return the URLs that were dropped."""
        check_image_count(image_urls)
        previous = [image.url for image in self.images]

        with atomic_change(self):
            for image in list(self.images):
                self.remove_images(image)
            for index, url in enumerate(image_urls):
                self.add_images(ProductImage(url=url, display_order=index))
            self.updated_at = datetime.now(UTC)

        return [url for url in previous if url not in image_urls]

    def image_urls(self) -> list[str]:
        return [image.url for image in sorted(self.images, key=lambda image: image.display_order or 0)]

    # -------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------
    def record_view(self) -> None:
        self.view_count = (self.view_count or 0) + 1

    def record_order(self, quantity: int = 1) -> None:
        self.order_count = (self.order_count or 0) + quantity

    def wishlisted(self) -> None:
        self.wishlist_count = (self.wishlist_count or 0) + 1

    def unwishlisted(self) -> None:
        self.wishlist_count = max(0, (self.wishlist_count or 0) - 1)


def check_image_count(image_urls) -> None:
    count = len(image_urls or [])
    if count < MIN_IMAGES or count > MAX_IMAGES:
        raise ValidationError({"images": [f"Between {MIN_IMAGES} and {MAX_IMAGES} images are required"]})
