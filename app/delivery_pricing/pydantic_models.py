import datetime
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from app.delivery_pricing.pydantic_types import Carrier, PackageSize, Price

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class ShippingModel(BaseModel):
    """Shipping plan entry model: one carrier's price for one package size"""

    model_config = ConfigDict(frozen=True)

    carrier: Carrier
    package_size: PackageSize
    price: Price


class TransactionModel(BaseModel):
    """Transaction fields as read from one input record.

    Attributes:
      date: shipment date, only YYYY-MM-DD text is accepted
      package_size: package size code
      carrier: carrier code
    """

    date: datetime.date
    package_size: PackageSize
    carrier: Carrier

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date_only(cls, value: Any) -> Any:
        if isinstance(value, str) and not _ISO_DATE.fullmatch(value):
            raise ValueError(f"date {value!r} is not in YYYY-MM-DD format")
        return value
