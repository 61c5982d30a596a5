"""Cart management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.utils.lookup import load


@storefront.command(part_of="Customer")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="Customer")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Customer")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Customer")
class ClearCart:
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Customer)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        customer = load(Customer, command.customer_id)
        product = load(Product, command.product_id)
        if not product.in_stock:
            raise ValidationError({"product_id": [f"Product {product.name} is out of stock"]})

        customer.add_to_cart(product_id=str(product.id), quantity=command.quantity or 1)
        current_domain.repository_for(Customer).add(customer)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        customer = load(Customer, command.customer_id)
        customer.update_cart_quantity(product_id=command.product_id, quantity=command.quantity)
        current_domain.repository_for(Customer).add(customer)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        customer = load(Customer, command.customer_id)
        customer.remove_from_cart(product_id=command.product_id)
        current_domain.repository_for(Customer).add(customer)

    @handle(ClearCart)
    def clear_cart(self, command):
        customer = load(Customer, command.customer_id)
        customer.clear_cart()
        current_domain.repository_for(Customer).add(customer)
