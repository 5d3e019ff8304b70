"""
Structured Logging Setup

JSON logging for the inquiry service: structlog for request-path events and
python-json-logger for everything going through the stdlib root logger.
"""

import logging
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger


def setup_json_logging(
    log_level: str = "INFO",
    service_name: str = "inquiry-intake",
    environment: str = "development",
    version: Optional[str] = None,
):
    """
    Configure structlog and the root logger to emit JSON lines on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Name of the service, bound to every event
        environment: Deployment environment name
        version: Optional release version bound to every event
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_handler = logging.StreamHandler(sys.stdout)
    json_handler.setFormatter(jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(json_handler)

    structlog.contextvars.clear_contextvars()
    context = {"service": service_name, "environment": environment}
    if version:
        context["version"] = version
    structlog.contextvars.bind_contextvars(**context)


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """Get a structured logger bound to the given name."""
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: str,
    **extra
):
    """
    Log an error event with its type and message.

    InquiryServiceError subclasses contribute their structured fields.
    Any other exception is logged with its traceback.
    """
    if hasattr(error, "to_dict"):
        logger.error(context, **error.to_dict(), **extra)
        return
    logger.error(
        context,
        error_type=type(error).__name__,
        message=str(error),
        exc_info=error,
        **extra,
    )
