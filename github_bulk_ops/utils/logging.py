"""structlog configuration for command-line runs."""

import logging
import sys

import structlog


def configure_logging(debug: bool = False) -> None:
    """Render key-value log events to stderr at INFO level, or DEBUG when requested.

    stdout is left free for the JSON response printed by the CLI.
    """
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
