"""Product deletion: command and handler. Image cleanup is best-effort."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.images import discard_images
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.utils.lookup import load

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load(Product, command.product_id)
        image_urls = product.image_urls()

        repo.delete_product(product)
        discard_images(image_urls)

        logger.info("product_deleted", product_id=str(command.product_id), code=product.code)
