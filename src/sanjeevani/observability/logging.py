"""
Structured Logging

structlog setup shared by the library and the demo script:
- JSON or console rendering
- ISO timestamps
- Token redaction so bearer values never reach log sinks
"""

import logging
import sys

import structlog


REDACTED_KEYS = ("token",)
VISIBLE_PREFIX = 8


def redact_token(value: str) -> str:
    """Short prefix of a bearer value, safe to log."""
    if len(value) <= VISIBLE_PREFIX:
        return value
    return value[:VISIBLE_PREFIX] + "..."


def token_redaction_processor(logger, method_name, event_dict):
    """Truncate token values in log events."""
    for key in REDACTED_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = redact_token(value)
    return event_dict


def configure_logging(
    level: str = "INFO",
    fmt: str = "json",
    cache_loggers: bool = True,
) -> None:
    """
    Configure structlog over the standard library logger.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ...)
        fmt: "json" for machine-readable output, "console" for humans
        cache_loggers: Freeze each logger's pipeline on first use
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            token_redaction_processor,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache_loggers,
    )
