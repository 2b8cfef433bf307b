from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import Field


class Carrier(str, Enum):
    """Shipping providers with their own price list"""

    LP = "LP"
    MR = "MR"

    def __str__(self):
        return self.value


class PackageSize(str, Enum):
    S = "S"
    M = "M"
    L = "L"

    def __str__(self):
        return self.value


class DiscountType(Enum):
    """Selects which discount rule a transaction goes through"""

    SMALL_PRICE = "small_price"
    THIRD_LARGE_SIZE = "third_large_size"


# Alias must match mapping key names (e.g json parsed dictionary's key names)
Limit = Annotated[Decimal, Field(gt=0, alias="limit")]
N = Annotated[int, Field(gt=0, alias="n")]
Price = Annotated[Decimal, Field(ge=0, alias="price")]
