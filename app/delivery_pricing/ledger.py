"""Keeps month-scoped discount state.

Discount rules depend on what happened earlier in the same calendar month:
how much discount was already granted and how many promotion eligible large
shipments were already sent. That state lives here, one ledger per month,
owned by the transaction processor and handed to the rules.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterator, KeysView, NamedTuple

logger = logging.getLogger(__name__)


class MonthKey(NamedTuple):
    year: int
    month: int

    @classmethod
    def from_date(cls, x: date) -> "MonthKey":
        return cls(x.year, x.month)

    def __str__(self):
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class MonthlyLedger:
    """Discount state of a single month"""

    accumulated_discount: Decimal = Decimal("0")
    qualifying_large_count: int = 0


class LedgerBook:
    """Monthly ledgers indexed by month.

    Ledgers are created lazily on first access and kept for the lifetime of
    the object. Not thread safe: transactions must be applied one at a time.
    """

    def __init__(self):
        self._ledgers: dict[MonthKey, MonthlyLedger] = {}

    def __repr__(self):
        return f"{self.__class__.__name__}(months={len(self)})"

    def __len__(self) -> int:
        return len(self._ledgers)

    def __iter__(self) -> Iterator[MonthKey]:
        return iter(self._ledgers)

    @property
    def months(self) -> KeysView[MonthKey]:
        return self._ledgers.keys()

    def get(self, month_key: MonthKey) -> MonthlyLedger:
        """Get month's ledger, creating an empty one if month is new"""
        ledger = self._ledgers.get(month_key)
        if ledger is None:
            ledger = MonthlyLedger()
            self._ledgers[month_key] = ledger
            logger.debug("Opened ledger for month %s", month_key)
        return ledger

    def add_discount(self, month_key: MonthKey, amount: Decimal) -> Decimal:
        """Add granted discount to month's accumulated discount.

        The amount is not capped here, limiting discounts is up to the rules.

        Returns:
            Month's accumulated discount after the addition.

        Raises:
            ValueError: if amount is negative.
        """
        if amount < 0:
            raise ValueError(
                f"discount amount must not be negative, got {amount}."
            )
        ledger = self.get(month_key)
        ledger.accumulated_discount += amount
        return ledger.accumulated_discount

    def increment_large_count(self, month_key: MonthKey) -> int:
        """Count one more qualifying large shipment and return new count"""
        ledger = self.get(month_key)
        ledger.qualifying_large_count += 1
        return ledger.qualifying_large_count
