"""
Structured logging configuration.

Uses structlog on top of the standard library. In JSON mode structlog
hands the event dict to python-json-logger as record extras, so each
event is encoded exactly once.
"""
import functools
import logging
import sys
from typing import Any, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

from invoicing.config import Settings, get_settings


def add_app_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
    settings: Optional[Settings] = None,
) -> dict[str, Any]:
    """
    Add application context to log events.

    Args:
        logger: Logger instance
        method_name: Log method name
        event_dict: Event dictionary
        settings: Settings to read app name/env from (cached settings if omitted)

    Returns:
        dict[str, Any]: Enhanced event dictionary
    """
    settings = settings or get_settings()
    event_dict["app_name"] = settings.app_name
    event_dict["app_env"] = settings.app_env
    return event_dict


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging.

    Sets up:
    - structlog processor chain with app context from ``settings``
    - JSON output through python-json-logger, or a console renderer
    - Root stdlib handler writing to stdout at the configured level

    Safe to call more than once: existing root handlers are replaced.
    """
    settings = settings or get_settings()

    handler = logging.StreamHandler(sys.stdout)
    final_processor: Any
    if settings.log_json:
        final_processor = structlog.stdlib.render_to_log_kwargs
        handler.setFormatter(JsonFormatter("%(message)s"))
    else:
        final_processor = structlog.dev.ConsoleRenderer()
        handler.setFormatter(logging.Formatter("%(message)s"))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            functools.partial(add_app_context, settings=settings),
            final_processor,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "logging_configured",
        log_level=settings.log_level,
        app_env=settings.app_env,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Any: Structured logger
    """
    return structlog.get_logger(name)
