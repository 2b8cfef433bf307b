"""Reads shipment records and formats priced results.

Record format is `<date> <package size> <carrier>`, e.g. `2015-02-01 S MR`.
Result line echoes the record and appends either price and discount
(`2015-02-01 S MR 1.50 0.50`, `-` when there is no discount) or `Ignored`.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, TextIO

from pydantic import ValidationError

from app.delivery_pricing.dataclasses import (
    IgnoredResult,
    PricedResult,
    Transaction,
)
from app.delivery_pricing.pydantic_models import TransactionModel

RECORD_FIELDS = ("date", "package_size", "carrier")
IGNORED = "Ignored"
NO_DISCOUNT = "-"
_CENT = Decimal("0.01")

logger = logging.getLogger(__name__)


class InvalidRecordError(ValueError):
    """Record can't be turned into a transaction"""

    def __init__(self, record: str, reason: str):
        super().__init__(f"invalid record {record!r}: {reason}")
        self.record = record
        self.reason = reason


def split_record(line: str) -> list[str]:
    return line.rstrip("\r\n").split()


def parse_record(line: str) -> Transaction:
    """Parse and validate one record.

    Args:
        line: record text, trailing line terminator is dropped.

    Returns:
        Transaction keeping the record text for echoing.

    Raises:
        InvalidRecordError: if record has wrong number of fields, or date,
                            package size or carrier is not recognized.
    """
    raw = line.rstrip("\r\n")
    fields = split_record(raw)
    if len(fields) != len(RECORD_FIELDS):
        raise InvalidRecordError(
            raw,
            f"expected {len(RECORD_FIELDS)} fields, got {len(fields)}",
        )
    try:
        model = TransactionModel(**dict(zip(RECORD_FIELDS, fields)))
    except ValidationError as e:
        reason = "; ".join(
            f"{'.'.join(map(str, err['loc']))}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidRecordError(raw, reason) from e
    return Transaction(raw=raw, **model.model_dump())


def read_lines(stream: TextIO) -> Iterator[str]:
    """Yield stream lines without line terminators, blank lines included"""
    for line in stream:
        yield line.rstrip("\r\n")


def format_money(x: Decimal) -> str:
    return str(x.quantize(_CENT, rounding=ROUND_HALF_UP))


def format_result(result: PricedResult | IgnoredResult) -> str:
    """Format result line: record text followed by price and discount, or
    by `Ignored` for records that could not be priced"""
    if isinstance(result, IgnoredResult):
        return f"{result.raw} {IGNORED}"
    discount = (
        format_money(result.discount)
        if result.discount is not None and result.discount > 0
        else NO_DISCOUNT
    )
    return f"{result.raw} {format_money(result.price)} {discount}"
