from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.delivery_pricing.ledger import MonthKey
from app.delivery_pricing.pydantic_types import Carrier, PackageSize


@dataclass(frozen=True)
class Transaction:
    """Validated shipment record together with its original text"""

    date: date
    package_size: PackageSize
    carrier: Carrier
    raw: str

    @property
    def month_key(self) -> MonthKey:
        return MonthKey.from_date(self.date)


@dataclass(frozen=True)
class PricedResult:
    """Shipping price after discount. `discount` is None when no discount
    was applied."""

    raw: str
    price: Decimal
    discount: Decimal | None


@dataclass(frozen=True)
class IgnoredResult:
    """Record that could not be priced"""

    raw: str
    reason: str = ""
