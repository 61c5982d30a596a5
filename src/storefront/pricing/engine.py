"""Pricing engine: the one formula that turns a product into a sale price.

Weighted products (net weight > 0) are priced on the silver they contain:

    final = round2((base_price + net_weight * rate + making_charge_rate * net_weight) * 0.9)

Flat products ignore the rate entirely:

    final = round2(base_price * 0.9)

Rounding is half-up to two decimals and happens exactly once, at the end.
The function is pure, so the same product at the same rate always yields the
same number wherever it is displayed or charged.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

# Storewide discount baked into every sale price
STOREWIDE_DISCOUNT = Decimal("0.10")

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


@dataclass(frozen=True)
class Weighted:
    """Price follows the silver rate: the product carries metal by weight."""

    net_weight: float
    making_charge_rate: float


@dataclass(frozen=True)
class Flat:
    """Price is fixed by the base price alone."""


PricingMode = Weighted | Flat


def to_decimal(value, field_name: str = "amount") -> Decimal:
    """Convert a numeric input to Decimal, rejecting negatives and non-finite values."""
    if value is None or isinstance(value, bool):
        raise ValidationError({field_name: ["A numeric value is required"]})
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError({field_name: ["Must be a finite number"]})
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError({field_name: ["Must be a number"]}) from exc
    if not amount.is_finite():
        raise ValidationError({field_name: ["Must be a finite number"]})
    if amount < 0:
        raise ValidationError({field_name: ["Must not be negative"]})
    return amount


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def money(value) -> float:
    """Normalise an amount to a two-decimal float."""
    return float(round2(to_decimal(value)))


def to_minor_units(amount) -> int:
    """Convert a major-unit amount to minor units (rupees to paise), half-up."""
    return int((to_decimal(amount) * 100).quantize(_UNIT, rounding=ROUND_HALF_UP))


def price_of(base_price, mode: PricingMode, rate_per_gram) -> float:
    """Compute the final sale price of a product at the given silver rate."""
    base = to_decimal(base_price, "base_price")
    rate = to_decimal(rate_per_gram, "rate_per_gram")

    if isinstance(mode, Weighted):
        net_weight = to_decimal(mode.net_weight, "net_weight")
        making_charge_rate = to_decimal(mode.making_charge_rate, "making_charge_rate")
        silver_cost = net_weight * rate
        making_charges = making_charge_rate * net_weight
        total = base + silver_cost + making_charges
    elif isinstance(mode, Flat):
        total = base
    else:
        raise ValidationError({"pricing_mode": [f"Unknown pricing mode: {mode!r}"]})

    return float(round2(total * (1 - STOREWIDE_DISCOUNT)))
