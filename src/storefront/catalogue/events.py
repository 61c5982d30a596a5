"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id = Identifier(required=True)
    code = String(required=True)
    name = String(required=True)
    base_price = Float(required=True)
    final_price = Float(required=True)
    category = String()
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    changed_fields = String()
    final_price = Float(required=True)
    updated_at = DateTime(required=True)
