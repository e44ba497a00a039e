"""Logging configuration for the Bakery domain."""

import logging
import os

import structlog


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for the current environment.

    Production (``PROTEAN_ENV=production``) renders JSON lines; every other
    environment gets the human-friendly console renderer.
    """
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    is_production = os.environ.get("PROTEAN_ENV") == "production"

    logging.basicConfig(format="%(message)s", level=level)

    renderer = structlog.processors.JSONRenderer() if is_production else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )

    # Suppress noisy library loggers
    logging.getLogger("protean").setLevel(logging.WARNING)
