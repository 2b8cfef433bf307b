"""Package logging setup.

Rules explain every decision they make for a transaction at TRACE level,
one step below DEBUG, so per-record reasoning can be switched on without
drowning regular debug output.
"""
import logging
import sys

TRACE = logging.DEBUG - 5
PACKAGE_LOGGER = "app.delivery_pricing"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _trace(self: logging.Logger, message, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


def add_trace_logging_level_if_not_exists() -> None:
    """Register TRACE level name and `Logger.trace` method.

    Safe to call repeatedly; an existing `trace` method or `logging.TRACE`
    attribute is left as is.
    """
    if logging.getLevelName(TRACE) != "TRACE":
        logging.addLevelName(TRACE, "TRACE")
    if not hasattr(logging, "TRACE"):
        setattr(logging, "TRACE", TRACE)
    logger_cls = logging.getLoggerClass()
    if not hasattr(logger_cls, "trace"):
        setattr(logger_cls, "trace", _trace)


def level_number(name: str) -> int:
    """Resolve level name, TRACE included (case insensitive).

    Raises:
        ValueError: if level name is unknown.
    """
    add_trace_logging_level_if_not_exists()
    number = logging.getLevelName(name.upper())
    if not isinstance(number, int):
        raise ValueError(f"unknown logging level {name!r}.")
    return number


def configure_logging(level: str = "WARNING") -> None:
    """Send package logs to standard error, replacing handlers set by an
    earlier call.

    Raises:
        ValueError: if level name is unknown.
    """
    number = level_number(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(number)
