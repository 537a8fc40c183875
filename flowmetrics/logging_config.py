"""Logging configuration for flowmetrics.

Log events are structured (structlog) and rendered to stderr so that the
report on stdout stays clean.
"""

import logging
import sys

import structlog


def resolve_level(verbose: bool = False, quiet: bool = False, default: str = "WARNING") -> int:
    """Pick the effective log level from CLI flags and the configured default."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    level = logging.getLevelName(default.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(verbose: bool = False, quiet: bool = False, level: str = "WARNING") -> None:
    """Configure structlog for command-line use.

    Args:
        verbose: Enable DEBUG level logging.
        quiet: Suppress all but ERROR level logging.
        level: Level used when neither flag is given.
    """
    log_level = resolve_level(verbose=verbose, quiet=quiet, default=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
