"""Wishlist management: commands and handler.

The product's wishlist counter moves with every add and remove.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.utils.lookup import load


@storefront.command(part_of="Customer")
class AddToWishlist:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Customer")
class RemoveFromWishlist:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Customer)
class ManageWishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        customer = load(Customer, command.customer_id)
        product = load(Product, command.product_id)

        customer.add_to_wishlist(str(product.id))
        product.wishlisted()

        current_domain.repository_for(Customer).add(customer)
        current_domain.repository_for(Product).add(product)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        customer = load(Customer, command.customer_id)
        if not customer.remove_from_wishlist(command.product_id):
            return
        current_domain.repository_for(Customer).add(customer)

        # The product may have been deleted since it was wishlisted
        product_repo = current_domain.repository_for(Product)
        try:
            product = product_repo.get(command.product_id)
        except ObjectNotFoundError:
            return
        product.unwishlisted()
        product_repo.add(product)
