"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)
