"""Base shipping prices per carrier and package size."""
import logging
from decimal import Decimal
from typing import Sequence

from pydantic import validate_call

from app.delivery_pricing.helpers import filter_objects, find
from app.delivery_pricing.pydantic_models import ShippingModel
from app.delivery_pricing.pydantic_types import Carrier, PackageSize

logger = logging.getLogger(__name__)


class PricingCatalog:
    """Immutable lookup of shipping prices.

    Built once from shipping plans. Each (carrier, package size) pair may
    appear at most once.
    """

    @validate_call
    def __init__(self, shipping_plans: Sequence[ShippingModel]):
        plans = tuple(shipping_plans)
        seen: set[tuple[Carrier, PackageSize]] = set()
        for plan in plans:
            pair = (plan.carrier, plan.package_size)
            if pair in seen:
                raise ValueError(
                    f"duplicate shipping plan for carrier {plan.carrier!s}"
                    f" and package size {plan.package_size!s}."
                )
            seen.add(pair)
        self._plans = plans
        logger.info("Initiated catalog with %d shipping plans", len(plans))

    def __repr__(self):
        return "{}({})".format(
            self.__class__.__name__,
            ",".join(
                f"{p.carrier!s}/{p.package_size!s}={p.price}"
                for p in self._plans
            ),
        )

    @property
    def shipping_plans(self) -> tuple[ShippingModel, ...]:
        return self._plans

    @property
    def carriers(self) -> frozenset[Carrier]:
        return frozenset(p.carrier for p in self._plans)

    @property
    def package_sizes(self) -> frozenset[PackageSize]:
        return frozenset(p.package_size for p in self._plans)

    def price_of(
        self, carrier: Carrier, package_size: PackageSize
    ) -> Decimal | None:
        """Get carrier's price for the package size or None if carrier
        does not ship that size."""
        try:
            plan = find(
                self._plans, carrier=carrier, package_size=package_size
            )
        except LookupError:
            return None
        return plan.price

    def cheapest_price(self, package_size: PackageSize) -> Decimal | None:
        """Lowest price among all carriers for the package size"""
        plans = filter_objects(self._plans, package_size=package_size)
        if not plans:
            return None
        return min(p.price for p in plans)

    def spread(self, carrier: Carrier, package_size: PackageSize) -> Decimal:
        """How much carrier's price exceeds the cheapest price of the
        package size.

        Raises:
            LookupError: if carrier does not ship the package size.
        """
        price = self.price_of(carrier, package_size)
        if price is None:
            raise LookupError(
                f"no price for carrier {carrier!s} and package size"
                f" {package_size!s}."
            )
        # cheapest_price can't be None once carrier has a price for the size
        return price - self.cheapest_price(package_size)  # type: ignore
