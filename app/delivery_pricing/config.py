"""Pricing settings: shipping plans, discount limit and promotion terms.

Defaults hold the reference price list. Any of them can be overridden from
a JSON file with the same keys, e.g.:

    {"limit": 10, "n": 3, "promotional_carrier": "LP",
     "shipping_plans": [{"carrier": "LP", "package_size": "S", "price": 1.5}]}
"""
import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.delivery_pricing.helpers import load_data
from app.delivery_pricing.pydantic_models import ShippingModel
from app.delivery_pricing.pydantic_types import Carrier, Limit, N, PackageSize

logger = logging.getLogger(__name__)

DEFAULT_SHIPPING_PLANS: tuple[ShippingModel, ...] = tuple(
    ShippingModel(carrier=carrier, package_size=size, price=Decimal(price))
    for carrier, size, price in (
        (Carrier.LP, PackageSize.S, "1.50"),
        (Carrier.LP, PackageSize.M, "4.90"),
        (Carrier.LP, PackageSize.L, "6.90"),
        (Carrier.MR, PackageSize.S, "2.00"),
        (Carrier.MR, PackageSize.M, "3.00"),
        (Carrier.MR, PackageSize.L, "4.00"),
    )
)
MAXIMUM_MONTHLY_DISCOUNT = Decimal("10")
FREE_SHIPMENT_NUMBER = 3


class Settings(BaseModel):
    """Pricing settings.

    Attributes:
      shipping_plans: price of every (carrier, package size) pair
      limit: maximum accumulated discount per month
      n: which large shipment of a month is free
      promotional_carrier: carrier whose large shipments take part in the
                           free shipment promotion
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    shipping_plans: tuple[ShippingModel, ...] = Field(
        default=DEFAULT_SHIPPING_PLANS, min_length=1
    )
    limit: Limit = MAXIMUM_MONTHLY_DISCOUNT
    n: N = FREE_SHIPMENT_NUMBER
    promotional_carrier: Carrier = Carrier.LP

    @model_validator(mode="after")
    def _unique_shipping_plans(self) -> "Settings":
        pairs = [(p.carrier, p.package_size) for p in self.shipping_plans]
        duplicates = {pair for pair in pairs if pairs.count(pair) > 1}
        if duplicates:
            text_pairs = ", ".join(
                f"{carrier!s}/{size!s}" for carrier, size in sorted(duplicates)
            )
            raise ValueError(f"duplicate shipping plans: {text_pairs}")
        return self


def load_settings(path: str | None = None) -> Settings:
    """Load settings from JSON file.

    Args:
        path: JSON file path. Keys missing from the file keep their defaults.
              If None, default settings are returned.

    Raises:
        OSError: if file can't be read.
        ValueError: if file is not valid JSON.
        pydantic.ValidationError: if settings are invalid.
    """
    if path is None:
        return Settings()
    data = load_data(path)
    if not isinstance(data, dict):
        raise TypeError(
            f"settings file must contain JSON object not {type(data).__name__}"
        )
    settings = Settings.model_validate(data)
    logger.info("Loaded settings from %s", path)
    return settings
