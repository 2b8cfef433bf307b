"""Contains discount rules implementations.

Each rule handles one kind of promotion, selected by its `DiscountType`:
* "small price" rule that lowers small package price to the cheapest small
  package price among carriers, within the monthly discount limit;
* "third large size" rule that makes N-th large shipment of a month via
  promotional carrier free.

Rules read and update month-scoped state in the `LedgerBook` they are given.
"""
import logging
from decimal import Decimal
from typing import ClassVar, Mapping

from app.delivery_pricing.catalog import PricingCatalog
from app.delivery_pricing.config import Settings
from app.delivery_pricing.helpers import (
    attributes_equal,
    mapping_to_pretty_str,
)
from app.delivery_pricing.ledger import LedgerBook
from app.delivery_pricing.logging import add_trace_logging_level_if_not_exists
from app.delivery_pricing.protocols import HasTransaction, SupportsDiscountRule
from app.delivery_pricing.pydantic_types import (
    Carrier,
    DiscountType,
    PackageSize,
)

RULE_NOT_APPLIED = "Rule is not applied:"

add_trace_logging_level_if_not_exists()


logger = logging.getLogger(__name__)


class RegisterDiscountRule:
    """Register discount rule

    Subclasses are included to the discount rules registry under their
    `discount_type`. In other words, any class that takes this class as a
    parent class is automatically available for use by the transaction
    processor.
    """

    _rules: dict[DiscountType, type[SupportsDiscountRule]] = {}

    @classmethod
    def get_rules(cls) -> Mapping[DiscountType, type[SupportsDiscountRule]]:
        """Get registered discount rules by discount type"""
        return dict(cls._rules)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not isinstance(cls, SupportsDiscountRule):
            raise TypeError(
                f"class {cls.__name__} must support SupportsDiscountRule"
                " protocol to be included in discount rules"
            )
        if cls.discount_type in cls._rules:
            raise TypeError(
                f"discount type {cls.discount_type} is already handled by"
                f" {cls._rules[cls.discount_type].__name__}"
            )
        cls._rules[cls.discount_type] = cls
        logger.info("Registered discount rule: %s", cls.__name__)


class MatchLowestPackagePrice(SupportsDiscountRule, RegisterDiscountRule):
    """Apply discount by matching the lowest shipping price among specific
    package size, while month's accumulated discount stays within limit"""

    discount_type: ClassVar[DiscountType] = DiscountType.SMALL_PRICE

    def __init__(
        self,
        catalog: PricingCatalog,
        limit: Decimal,
        package_size: PackageSize = PackageSize.S,
    ):
        """Initializes class instance based on provided parameters

        Args:
            catalog: shipping prices the lowest price is looked up in
            limit: maximum accumulated discount per month
            package_size: package size eligible for the discount
        """
        self._catalog = catalog
        self._limit = limit
        self._package_size = package_size
        self._logger = logging.getLogger(f"{__name__}.{self.__str__()}")
        self._logger.info("Initiated class: %s", repr(self))

    @classmethod
    def from_settings(
        cls, settings: Settings, catalog: PricingCatalog
    ) -> "MatchLowestPackagePrice":
        return cls(catalog=catalog, limit=settings.limit)

    def _params(self) -> dict[str, object]:
        return {"limit": self._limit, "package_size": self._package_size}

    def __repr__(self):
        return "{}({})".format(
            self.__class__.__name__,
            mapping_to_pretty_str(self._params(), value_repr=True),
        )

    def __str__(self):
        return "{}({})".format(
            self.__class__.__name__,
            mapping_to_pretty_str(self._params(), value_repr=False),
        )

    def calculate_discount(
        self,
        transaction: HasTransaction,
        price: Decimal,
        ledger: LedgerBook,
    ) -> Decimal:
        if not attributes_equal(transaction, package_size=self._package_size):
            return Decimal("0")

        spread = self._catalog.spread(
            transaction.carrier, transaction.package_size
        )
        if spread <= 0:
            self._logger.trace(  # type: ignore
                "%s carrier %s already offers the lowest price.",
                RULE_NOT_APPLIED,
                transaction.carrier,
            )
            return Decimal("0")

        month_key = transaction.month_key
        accumulated = ledger.get(month_key).accumulated_discount
        discount = min(spread, self._limit - accumulated)
        if discount <= 0:
            self._logger.trace(  # type: ignore
                (
                    "%s accumulated discount of month %s (%s) reached"
                    " the limit (%s)."
                ),
                RULE_NOT_APPLIED,
                month_key,
                accumulated,
                self._limit,
            )
            return Decimal("0")

        if discount < spread:
            self._logger.debug(
                "Discount reduced by %s to stay within monthly limit",
                spread - discount,
            )
        ledger.add_discount(month_key, discount)
        return discount


class NthShipmentIsFreeOnceAMonth(SupportsDiscountRule, RegisterDiscountRule):
    """Make N-th shipment of a month of specific carrier and package size
    free. Only the N-th one is free, later shipments of the same month are
    charged in full."""

    discount_type: ClassVar[DiscountType] = DiscountType.THIRD_LARGE_SIZE

    def __init__(
        self,
        n: int,
        carrier: Carrier,
        package_size: PackageSize = PackageSize.L,
    ):
        """Initializes class instance based on provided parameters

        Args:
            n: which shipment of the month is free (n=3 makes the third one
               free)
            carrier: promotional carrier
            package_size: package size eligible for the discount
        """
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}.")
        self._n = n
        self._transaction_type = {
            "carrier": carrier,
            "package_size": package_size,
        }
        self._logger = logging.getLogger(f"{__name__}.{self.__str__()}")
        self._logger.info("Initiated class: %s", repr(self))

    @classmethod
    def from_settings(
        cls, settings: Settings, catalog: PricingCatalog
    ) -> "NthShipmentIsFreeOnceAMonth":
        return cls(n=settings.n, carrier=settings.promotional_carrier)

    def __repr__(self):
        return "{}(n={},{})".format(
            self.__class__.__name__,
            repr(self._n),
            mapping_to_pretty_str(self._transaction_type, value_repr=True),
        )

    def __str__(self):
        return "{}(n={},{})".format(
            self.__class__.__name__,
            str(self._n),
            mapping_to_pretty_str(self._transaction_type, value_repr=False),
        )

    def calculate_discount(
        self,
        transaction: HasTransaction,
        price: Decimal,
        ledger: LedgerBook,
    ) -> Decimal:
        if not attributes_equal(transaction, **self._transaction_type):
            return Decimal("0")

        month_key = transaction.month_key
        number_of_similar = ledger.increment_large_count(month_key)
        if number_of_similar != self._n:
            self._logger.trace(  # type: ignore
                (
                    "%s only shipment number %d of a month is free, but this"
                    " is shipment number %d of month %s"
                ),
                RULE_NOT_APPLIED,
                self._n,
                number_of_similar,
                month_key,
            )
            return Decimal("0")

        self._logger.trace(  # type: ignore
            "Rule met all requirements for a free shipping."
        )
        ledger.add_discount(month_key, price)
        return price
