"""Command line entry point: prices every record of the input file and
prints result lines to standard output."""
import argparse
import io
import logging
import sys
from typing import Sequence, TextIO

from pydantic import ValidationError

from app.delivery_pricing.config import load_settings
from app.delivery_pricing.logging import configure_logging
from app.delivery_pricing.records import format_result, read_lines
from app.delivery_pricing.transaction import TransactionProcessor

DEFAULT_INPUT = "input.txt"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delivery-pricing",
        description="Calculate shipping prices and discounts.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=DEFAULT_INPUT,
        help=(
            "transactions file, '-' for standard input"
            f" (default: {DEFAULT_INPUT})"
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON file overriding shipping plans and discount settings",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="logging level, TRACE included (default: WARNING)",
    )
    return parser


def run(stream: TextIO, processor: TransactionProcessor, out: TextIO) -> int:
    """Price records from stream and write result lines to out.

    Returns:
        Number of processed records.
    """
    count = 0
    for result in processor.process_lines(read_lines(stream)):
        print(format_result(result), file=out)
        count += 1
    return count


def _decoded_stdin() -> TextIO:
    # undecodable bytes are read as U+FFFD
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="replace")
    return sys.stdin


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        print(f"delivery-pricing: {e}", file=sys.stderr)
        return 1

    try:
        settings = load_settings(args.config)
    except ValidationError as e:
        logger.error("Invalid settings in %s:\n%s", args.config, e)
        return 1
    except (OSError, TypeError, ValueError) as e:
        logger.error("Unable to load settings from %s: %s", args.config, e)
        return 1

    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(errors="replace")

    processor = TransactionProcessor(settings)
    try:
        if args.input == "-":
            count = run(_decoded_stdin(), processor, sys.stdout)
        else:
            with open(args.input, encoding="utf-8", errors="replace") as f:
                count = run(f, processor, sys.stdout)
    except OSError as e:
        logger.error("Unable to read transactions from %s: %s", args.input, e)
        return 1

    logger.info("Processed %d records", count)
    return 0
