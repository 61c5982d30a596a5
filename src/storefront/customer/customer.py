"""Customer aggregate: account flags plus the cart and wishlist the customer owns."""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from storefront.customer.events import CustomerRegistered
from storefront.domain import storefront
from storefront.errors import Conflict, NotFound


@storefront.entity(part_of="Customer")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Customer:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    is_admin = Boolean(default=False)
    cart = HasMany(CartItem)
    wishlist = Text()  # JSON array of product ids
    registered_at = DateTime()

    @classmethod
    def register(cls, name, email, phone=None, is_admin=False):
        now = datetime.now(UTC)
        customer = cls(
            name=name,
            email=(email or "").strip().lower(),
            phone=phone,
            is_admin=is_admin,
            wishlist=json.dumps([]),
            registered_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=customer.name,
                email=customer.email,
                registered_at=now,
            )
        )
        return customer

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def _cart_item(self, product_id):
        return next((item for item in self.cart if str(item.product_id) == str(product_id)), None)

    def add_to_cart(self, product_id, quantity: int = 1) -> CartItem:
        """Add a product, or increase its quantity when already in the cart."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self._cart_item(product_id)
        if existing:
            existing.quantity += quantity
            return existing

        item = CartItem(product_id=product_id, quantity=quantity, added_at=datetime.now(UTC))
        self.add_cart(item)
        return item

    def update_cart_quantity(self, product_id, quantity: int) -> None:
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._cart_item(product_id)
        if item is None:
            raise NotFound("cart_item_not_found", "Product not found in cart")
        item.quantity = quantity

    def remove_from_cart(self, product_id) -> None:
        item = self._cart_item(product_id)
        if item is None:
            raise NotFound("cart_item_not_found", "Product not found in cart")
        self.remove_cart(item)

    def clear_cart(self) -> None:
        for item in list(self.cart):
            self.remove_cart(item)

    # -------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------
    def wishlist_ids(self) -> list[str]:
        return json.loads(self.wishlist) if self.wishlist else []

    def add_to_wishlist(self, product_id) -> None:
        ids = self.wishlist_ids()
        if str(product_id) in ids:
            raise Conflict("already_in_wishlist", "Product already in wishlist")
        ids.append(str(product_id))
        self.wishlist = json.dumps(ids)

    def remove_from_wishlist(self, product_id) -> bool:
        """Drop a product from the wishlist. Returns False when it was not there."""
        ids = self.wishlist_ids()
        if str(product_id) not in ids:
            return False
        ids.remove(str(product_id))
        self.wishlist = json.dumps(ids)
        return True
