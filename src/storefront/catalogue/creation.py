"""Product creation: command and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.images import discard_images, parse_uploads, upload_images
from storefront.catalogue.product import Product, check_image_count
from storefront.domain import storefront
from storefront.errors import Conflict
from storefront.pricing.rate import CommodityRate

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    code = String(required=True, max_length=50)
    base_price = Float(required=True, min_value=0.0)
    net_weight = Float(default=0.0, min_value=0.0)
    gross_weight = Float(default=0.0, min_value=0.0)
    silver_weight = Float(default=0.0, min_value=0.0)
    making_charge_rate = Float(default=0.0, min_value=0.0)
    category = String(max_length=100)
    description = Text()
    in_stock = Boolean(default=True)
    images = Text(required=True)  # JSON array of {"filename", "content"}


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_code(command.code):
            raise Conflict("duplicate_product_code", f"Product code {command.code.strip().upper()} already exists")

        uploads = parse_uploads(command.images)
        check_image_count(uploads)
        image_urls = upload_images(uploads)

        try:
            rate = current_domain.repository_for(CommodityRate).latest()
            product = Product.create(
                name=command.name,
                code=command.code,
                base_price=command.base_price,
                image_urls=image_urls,
                rate_per_gram=rate.price_per_gram,
                net_weight=command.net_weight,
                gross_weight=command.gross_weight,
                silver_weight=command.silver_weight,
                making_charge_rate=command.making_charge_rate,
                category=command.category,
                description=command.description,
                in_stock=command.in_stock if command.in_stock is not None else True,
            )
            repo.add(product)
        except Exception:
            discard_images(image_urls)
            raise

        logger.info("product_created", product_id=str(product.id), code=product.code)
        return str(product.id)
