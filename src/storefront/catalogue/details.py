"""Product updates: command and handler.

Any subset of attributes may change. A new image set, when supplied, replaces
the old one entirely and the old files are deleted best-effort once the new
set is in place.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.images import discard_images, parse_uploads, upload_images
from storefront.catalogue.product import Product, check_image_count, normalize_code
from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.pricing.rate import CommodityRate
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)

_ATTRIBUTES = (
    "name",
    "code",
    "base_price",
    "net_weight",
    "gross_weight",
    "silver_weight",
    "making_charge_rate",
    "category",
    "description",
    "in_stock",
)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    code = String(max_length=50)
    base_price = Float(min_value=0.0)
    net_weight = Float(min_value=0.0)
    gross_weight = Float(min_value=0.0)
    silver_weight = Float(min_value=0.0)
    making_charge_rate = Float(min_value=0.0)
    category = String(max_length=100)
    description = Text()
    in_stock = Boolean()
    images = Text()  # Optional replacement set, same format as CreateProduct


@storefront.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load(Product, command.product_id)

        if command.code and normalize_code(command.code) != product.code:
            existing = repo.find_by_code(command.code)
            if existing and str(existing.id) != str(product.id):
                raise Conflict("duplicate_product_code", f"Product code {normalize_code(command.code)} already exists")

        changes = {name: getattr(command, name) for name in _ATTRIBUTES if getattr(command, name) is not None}
        rate = current_domain.repository_for(CommodityRate).latest()
        product.update_details(rate_per_gram=rate.price_per_gram, **changes)

        dropped_urls: list[str] = []
        if command.images:
            uploads = parse_uploads(command.images)
            check_image_count(uploads)
            new_urls = upload_images(uploads)
            try:
                dropped_urls = product.replace_images(new_urls)
            except Exception:
                discard_images(new_urls)
                raise

        repo.add(product)
        discard_images(dropped_urls)

        logger.info("product_updated", product_id=str(product.id), fields=sorted(changes))
