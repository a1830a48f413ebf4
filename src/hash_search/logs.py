import logging
import sys

import structlog

LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
}


def configure_logging(verbosity: int = 0) -> None:
    """Send structured logs to stderr. Standard output is reserved for data."""
    level = LEVELS.get(verbosity, logging.DEBUG)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
