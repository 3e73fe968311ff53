"""Order policy: the configuration values order handlers depend on.

Built once in the composition root from the application settings and
passed into handlers explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.service.order_totals import VAT_RATE


@dataclass(frozen=True)
class OrderPolicy:
    tax_rate: Decimal = VAT_RATE
    currency: str = DEFAULT_CURRENCY
    shipping_fee: Decimal = Decimal("0.00")
    order_number_prefix: str = "FUS"
    online_payments_enabled: bool = False
    archive_retention_days: int = 14

    @property
    def shipping(self) -> Money:
        return Money(self.shipping_fee, self.currency)
