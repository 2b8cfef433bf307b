import logging
from decimal import Decimal
from typing import Iterable, Iterator, Mapping

from app.delivery_pricing.catalog import PricingCatalog
from app.delivery_pricing.config import Settings
from app.delivery_pricing.dataclasses import (
    IgnoredResult,
    PricedResult,
    Transaction,
)
from app.delivery_pricing.ledger import LedgerBook
from app.delivery_pricing.protocols import SupportsDiscountRule
from app.delivery_pricing.pydantic_types import DiscountType, PackageSize
from app.delivery_pricing.records import InvalidRecordError, parse_record
from app.delivery_pricing.rules import RegisterDiscountRule

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """Determines if discount is applicable, discount size and shipping's
    final price.

    Transactions must be processed in the order they happened: discounts
    depend on earlier transactions of the same month, kept in the processor's
    ledger.
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize object based on provided settings

        Args:
            settings: shipping plans, discount limit and promotion terms.
                      Default settings are used if None.
        """
        self._settings = settings if settings is not None else Settings()
        self._catalog = PricingCatalog(self._settings.shipping_plans)
        self._ledger = LedgerBook()
        self._rules: Mapping[DiscountType, SupportsDiscountRule] = {
            discount_type: rule_cls.from_settings(
                self._settings, self._catalog
            )
            for discount_type, rule_cls in (
                RegisterDiscountRule.get_rules().items()
            )
        }

    @property
    def catalog(self) -> PricingCatalog:
        return self._catalog

    @property
    def ledger(self) -> LedgerBook:
        return self._ledger

    @property
    def rules(self) -> Mapping[DiscountType, SupportsDiscountRule]:
        return dict(self._rules)

    def select_discount_type(
        self, transaction: Transaction
    ) -> DiscountType | None:
        """Discount rule the transaction goes through, None if no rule is
        applicable"""
        if transaction.package_size == PackageSize.S:
            return DiscountType.SMALL_PRICE
        if (
            transaction.package_size == PackageSize.L
            and transaction.carrier == self._settings.promotional_carrier
        ):
            return DiscountType.THIRD_LARGE_SIZE
        return None

    def apply_discount(
        self,
        discount_type: DiscountType,
        transaction: Transaction,
        price: Decimal,
    ) -> tuple[Decimal, Decimal]:
        """Apply discount rule of given type.

        Returns:
            Price after discount and discount size. Unknown discount type
            leaves price and ledger untouched.
        """
        rule = self._rules.get(discount_type)
        if rule is None:
            logger.warning("Unknown discount type: %s", discount_type)
            return price, Decimal("0")

        discount = rule.calculate_discount(transaction, price, self._ledger)
        logger.debug("Calculated discount from '%s': %s", rule, discount)
        return price - discount, discount

    def process_transaction(self, transaction: Transaction) -> PricedResult:
        """Determines discount's size (if applicable) and price after discount.

        Raises:
            InvalidRecordError: if there is no price for transaction's
                                carrier and package size.
        """
        price = self._catalog.price_of(
            transaction.carrier, transaction.package_size
        )
        if price is None:
            raise InvalidRecordError(
                transaction.raw,
                f"no price for carrier {transaction.carrier!s} and package"
                f" size {transaction.package_size!s}",
            )

        discount = Decimal("0")
        discount_type = self.select_discount_type(transaction)
        if discount_type is not None:
            price, discount = self.apply_discount(
                discount_type, transaction, price
            )

        return PricedResult(
            raw=transaction.raw,
            price=price,
            discount=discount if discount > 0 else None,
        )

    def process_line(self, line: str) -> PricedResult | IgnoredResult:
        """Price one record. Records that can't be priced are ignored without
        changing any discount state."""
        logger.debug("Processing record: %r", line)
        try:
            transaction = parse_record(line)
            return self.process_transaction(transaction)
        except InvalidRecordError as e:
            logger.debug("Ignored record: %s", e)
            return IgnoredResult(raw=e.record, reason=e.reason)

    def process_lines(
        self, lines: Iterable[str]
    ) -> Iterator[PricedResult | IgnoredResult]:
        """Price records one by one, in order"""
        for line in lines:
            yield self.process_line(line)
