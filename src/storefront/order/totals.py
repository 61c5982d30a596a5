"""Order Total Composer.

The single place where order money is added up:

    subtotal     = sum(unit_price * quantity)
    total_amount = max(0, subtotal - discount + delivery_charge + sum(charges))

The discount applies to the product subtotal only; delivery and additional
charges are added after it. Unit prices are the frozen snapshots carried by
the items, so composing never re-prices anything. Cart display, order
placement, admin edits and the Order invariant all go through here.
"""

from dataclasses import dataclass
from decimal import Decimal

from storefront.pricing.engine import round2, to_decimal


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    total_amount: float


def subtotal_of(items) -> Decimal:
    """Sum of ``unit_price * quantity`` over objects exposing both attributes."""
    total = Decimal("0")
    for item in items or []:
        total += to_decimal(item.unit_price, "unit_price") * to_decimal(item.quantity, "quantity")
    return total


def charges_total(charges) -> Decimal:
    total = Decimal("0")
    for charge in charges or []:
        total += to_decimal(charge.amount, "additional_charges")
    return total


def total_of(subtotal, discount, delivery_charge, charges) -> Decimal:
    amount = (
        to_decimal(subtotal, "subtotal")
        - to_decimal(discount or 0, "discount")
        + to_decimal(delivery_charge or 0, "delivery_charge")
        + charges_total(charges)
    )
    return max(Decimal("0"), round2(amount))


def compose(items, additional_charges=None, delivery_charge=0.0, discount=0.0) -> OrderTotals:
    """Totals for a fresh set of priced items."""
    subtotal = round2(subtotal_of(items))
    return OrderTotals(
        subtotal=float(subtotal),
        total_amount=float(total_of(subtotal, discount, delivery_charge, additional_charges)),
    )


def recompose(subtotal, discount, delivery_charge, additional_charges) -> OrderTotals:
    """Totals for an existing order from its stored subtotal and discount."""
    return OrderTotals(
        subtotal=float(round2(to_decimal(subtotal, "subtotal"))),
        total_amount=float(total_of(subtotal, discount, delivery_charge, additional_charges)),
    )
