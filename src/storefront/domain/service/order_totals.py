"""Domain service: Order Totals Calculator.

A pure function from priced lines to money totals, shared by order
creation and item editing so both paths round the same way.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderItem
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money

VAT_RATE = Decimal("0.15")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money


def calculate_totals(
    items: Iterable[OrderItem],
    shipping: Money | None = None,
    discount: Money | None = None,
    tax_rate: Decimal = VAT_RATE,
    currency: str = DEFAULT_CURRENCY,
) -> OrderTotals:
    """Compute subtotal, VAT and grand total for a set of order lines.

    ``subtotal = sum(price * qty)``, ``tax = subtotal * tax_rate`` and
    ``total = subtotal + tax + shipping - discount``.  Every amount is
    quantized to cents (half up).  Money refuses NaN, infinities and
    negatives, so an impossible result raises ValidationError instead of
    being coerced.
    """
    if not isinstance(tax_rate, Decimal) or not tax_rate.is_finite() or tax_rate < 0:
        raise ValidationError(f"Invalid tax rate: {tax_rate!r}")

    shipping = (shipping or Money.zero(currency)).rounded()
    discount = (discount or Money.zero(currency)).rounded()

    subtotal = Money.zero(currency)
    for item in items:
        subtotal = subtotal + item.total
    subtotal = subtotal.rounded()

    tax = (subtotal * tax_rate).rounded()
    gross = subtotal + tax + shipping
    if discount > gross:
        raise ValidationError(
            f"Discount {discount} exceeds order value {gross}"
        )
    total = gross - discount

    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=total,
    )
