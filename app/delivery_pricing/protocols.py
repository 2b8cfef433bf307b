from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from app.delivery_pricing.catalog import PricingCatalog
from app.delivery_pricing.config import Settings
from app.delivery_pricing.ledger import LedgerBook, MonthKey
from app.delivery_pricing.pydantic_types import (
    Carrier,
    DiscountType,
    PackageSize,
)


@runtime_checkable
class HasTransaction(Protocol):
    date: date
    carrier: Carrier
    package_size: PackageSize

    @property
    def month_key(self) -> MonthKey:
        ...


@runtime_checkable
class SupportsDiscountRule(Protocol):
    """Every discount rule implements this protocol"""

    discount_type: DiscountType

    @classmethod
    def from_settings(
        cls, settings: Settings, catalog: PricingCatalog
    ) -> "SupportsDiscountRule":
        """Build the rule from pricing settings

        Args:
            settings: discount limit and promotion terms
            catalog: shipping prices built from the same settings
        """
        ...

    def calculate_discount(
        self,
        transaction: HasTransaction,
        price: Decimal,
        ledger: LedgerBook,
    ) -> Decimal:
        """Calculates discount (if any) and records it in the ledger

        Args:
            transaction: transaction details
            price: price before discount
            ledger: monthly discount state, updated by the rule

        Returns:
            Decimal: discount size, zero when not applicable
        """
        ...
