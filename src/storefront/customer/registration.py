"""Customer registration: command and handler. Emails are unique."""

from protean import handle
from protean.fields import Boolean, String
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.errors import Conflict


@storefront.command(part_of="Customer")
class RegisterCustomer:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    is_admin = Boolean(default=False)


@storefront.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(Customer)
        email = command.email.strip().lower()
        if repo._dao.query.filter(email=email).all().items:
            raise Conflict("duplicate_email", f"A customer with email {email} already exists")

        customer = Customer.register(
            name=command.name,
            email=email,
            phone=command.phone,
            is_admin=bool(command.is_admin),
        )
        repo.add(customer)
        return str(customer.id)
