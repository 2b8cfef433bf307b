from decimal import Decimal

import pytest

from app.delivery_pricing.config import Settings
from app.delivery_pricing.pydantic_types import (
    Carrier,
    DiscountType,
    PackageSize,
)
from app.delivery_pricing.rules import (
    MatchLowestPackagePrice,
    NthShipmentIsFreeOnceAMonth,
    RegisterDiscountRule,
)

LARGE_LP_PRICE = Decimal("6.90")


@pytest.fixture
def small_rule(catalog):
    return MatchLowestPackagePrice(catalog=catalog, limit=Decimal("10"))


@pytest.fixture
def large_rule():
    return NthShipmentIsFreeOnceAMonth(n=3, carrier=Carrier.LP)


class TestRegistry:
    def test_rules_registered_by_discount_type(self):
        rules = RegisterDiscountRule.get_rules()
        assert rules[DiscountType.SMALL_PRICE] is MatchLowestPackagePrice
        assert (
            rules[DiscountType.THIRD_LARGE_SIZE]
            is NthShipmentIsFreeOnceAMonth
        )

    def test_class_without_protocol_is_rejected(self):
        with pytest.raises(TypeError):

            class NotARule(RegisterDiscountRule):
                pass

        assert "NotARule" not in {
            cls.__name__ for cls in RegisterDiscountRule.get_rules().values()
        }


class TestMatchLowestPackagePrice:
    def test_cheapest_carrier_gets_no_discount(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(carrier=Carrier.LP)
        discount = small_rule.calculate_discount(
            transaction, Decimal("1.50"), ledger
        )
        assert discount == 0
        assert ledger.get(transaction.month_key).accumulated_discount == 0

    def test_discount_matches_lowest_price(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(carrier=Carrier.MR)
        discount = small_rule.calculate_discount(
            transaction, Decimal("2.00"), ledger
        )
        assert discount == Decimal("0.50")
        assert ledger.get(transaction.month_key).accumulated_discount == (
            Decimal("0.50")
        )

    def test_discount_reduced_to_remaining_limit(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(carrier=Carrier.MR)
        ledger.add_discount(transaction.month_key, Decimal("9.90"))

        discount = small_rule.calculate_discount(
            transaction, Decimal("2.00"), ledger
        )

        assert discount == Decimal("0.10")
        assert ledger.get(transaction.month_key).accumulated_discount == 10

    def test_no_discount_once_limit_reached(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(carrier=Carrier.MR)
        ledger.add_discount(transaction.month_key, Decimal("10"))

        discount = small_rule.calculate_discount(
            transaction, Decimal("2.00"), ledger
        )

        assert discount == 0
        assert ledger.get(transaction.month_key).accumulated_discount == 10

    def test_accumulated_over_limit_floors_at_zero(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(carrier=Carrier.MR)
        ledger.add_discount(transaction.month_key, Decimal("13.40"))

        discount = small_rule.calculate_discount(
            transaction, Decimal("2.00"), ledger
        )

        assert discount == 0
        assert ledger.get(transaction.month_key).accumulated_discount == (
            Decimal("13.40")
        )

    def test_other_package_sizes_are_skipped(
        self, small_rule, ledger, make_transaction
    ):
        transaction = make_transaction(
            package_size=PackageSize.M, carrier=Carrier.LP
        )
        discount = small_rule.calculate_discount(
            transaction, Decimal("4.90"), ledger
        )
        assert discount == 0
        assert len(ledger) == 0

    def test_limit_is_per_month(self, small_rule, ledger, make_transaction):
        august = make_transaction(raw_date="2023-08-06")
        ledger.add_discount(august.month_key, Decimal("10"))
        september = make_transaction(raw_date="2023-09-01")

        discount = small_rule.calculate_discount(
            september, Decimal("2.00"), ledger
        )

        assert discount == Decimal("0.50")


class TestNthShipmentIsFreeOnceAMonth:
    def _ship(self, rule, ledger, transaction, times):
        return [
            rule.calculate_discount(transaction, LARGE_LP_PRICE, ledger)
            for _ in range(times)
        ]

    def test_only_third_shipment_is_free(
        self, large_rule, ledger, make_transaction
    ):
        transaction = make_transaction(
            package_size=PackageSize.L, carrier=Carrier.LP
        )
        discounts = self._ship(large_rule, ledger, transaction, 6)
        assert discounts == [0, 0, LARGE_LP_PRICE, 0, 0, 0]

    def test_waiver_counts_toward_accumulated_discount(
        self, large_rule, ledger, make_transaction
    ):
        transaction = make_transaction(
            package_size=PackageSize.L, carrier=Carrier.LP
        )
        self._ship(large_rule, ledger, transaction, 3)
        month = ledger.get(transaction.month_key)
        assert month.accumulated_discount == LARGE_LP_PRICE
        assert month.qualifying_large_count == 3

    def test_waiver_is_not_capped_by_monthly_limit(
        self, large_rule, ledger, make_transaction
    ):
        transaction = make_transaction(
            package_size=PackageSize.L, carrier=Carrier.LP
        )
        ledger.add_discount(transaction.month_key, Decimal("10"))
        discounts = self._ship(large_rule, ledger, transaction, 3)
        assert discounts[-1] == LARGE_LP_PRICE
        assert ledger.get(transaction.month_key).accumulated_discount == (
            Decimal("16.90")
        )

    def test_other_carrier_is_not_counted(
        self, large_rule, ledger, make_transaction
    ):
        transaction = make_transaction(
            package_size=PackageSize.L, carrier=Carrier.MR
        )
        discounts = self._ship(large_rule, ledger, transaction, 3)
        assert discounts == [0, 0, 0]
        assert len(ledger) == 0

    def test_counter_restarts_next_month(
        self, large_rule, ledger, make_transaction
    ):
        august = make_transaction(
            raw_date="2023-08-06",
            package_size=PackageSize.L,
            carrier=Carrier.LP,
        )
        september = make_transaction(
            raw_date="2023-09-06",
            package_size=PackageSize.L,
            carrier=Carrier.LP,
        )
        self._ship(large_rule, ledger, august, 2)
        discounts = self._ship(large_rule, ledger, september, 3)
        assert discounts == [0, 0, LARGE_LP_PRICE]

    def test_n_must_be_positive(self):
        with pytest.raises(ValueError):
            NthShipmentIsFreeOnceAMonth(n=0, carrier=Carrier.LP)


class TestFromSettings:
    def test_small_rule_uses_settings_limit(
        self, catalog, ledger, make_transaction
    ):
        settings = Settings(limit=Decimal("0.20"))
        rule = MatchLowestPackagePrice.from_settings(settings, catalog)
        transaction = make_transaction(carrier=Carrier.MR)
        assert rule.calculate_discount(
            transaction, Decimal("2.00"), ledger
        ) == Decimal("0.20")

    def test_large_rule_uses_settings_promotion(self, catalog):
        settings = Settings(n=2, promotional_carrier=Carrier.MR)
        rule = NthShipmentIsFreeOnceAMonth.from_settings(settings, catalog)
        assert str(rule) == (
            "NthShipmentIsFreeOnceAMonth(n=2,carrier=MR,package_size=L)"
        )
