import logging
from datetime import date

import pytest

from app.delivery_pricing.catalog import PricingCatalog
from app.delivery_pricing.config import Settings
from app.delivery_pricing.dataclasses import Transaction
from app.delivery_pricing.ledger import LedgerBook
from app.delivery_pricing.pydantic_types import Carrier, PackageSize
from app.delivery_pricing.transaction import TransactionProcessor

# Reference price list:
#   LP: S 1.50, M 4.90, L 6.90
#   MR: S 2.00, M 3.00, L 4.00


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def catalog(settings) -> PricingCatalog:
    return PricingCatalog(settings.shipping_plans)


@pytest.fixture
def ledger() -> LedgerBook:
    return LedgerBook()


@pytest.fixture
def processor(settings) -> TransactionProcessor:
    return TransactionProcessor(settings)


@pytest.fixture
def make_transaction():
    def _make(
        raw_date: str = "2023-08-06",
        package_size: PackageSize = PackageSize.S,
        carrier: Carrier = Carrier.MR,
    ) -> Transaction:
        return Transaction(
            date=date.fromisoformat(raw_date),
            package_size=package_size,
            carrier=carrier,
            raw=f"{raw_date} {package_size} {carrier}",
        )

    return _make


@pytest.fixture
def reset_package_logger():
    """Undo handlers and level set by configure_logging"""
    package_logger = logging.getLogger("app.delivery_pricing")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
