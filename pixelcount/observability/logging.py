"""
Structured Logging - structlog configuration

Event-style log lines (`pixel_aggregator.compute.complete`, ...) with
keyword context. JSON in production, console output otherwise. Logs go
to stderr so CLI output on stdout stays clean.
"""

import structlog
import logging
import sys

from ..core.config import settings


def _add_service(logger, method_name, event_dict):
    """Tag every event with the service and environment names."""
    event_dict.setdefault("service", settings.service_name)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def setup_logging():
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once (the API lifespan and the CLI both call it).
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.environment == "production":
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper()),
    )


def get_logger(name: str = None):
    """Get a structlog logger"""
    return structlog.get_logger(name or __name__)
