"""Structured logging for the SaaS Factory service.

Production ships JSON lines with structured tracebacks; other environments
get a console renderer with rich tracebacks. Every line carries the service
name, the environment and the demo mode flag. Request handlers add
correlation_id, method and path through contextvars.

Usage:
    from saas_factory.logging import setup_logging, get_logger

    setup_logging(get_settings())
    logger = get_logger(__name__)
    logger.info("project_created", project_id=project.id)
"""

import logging
import sys
from typing import Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ..config import Settings, get_settings

# Libraries kept at WARNING unless the service itself runs at DEBUG
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")


def service_fields(service: str, environment: str, demo_mode: bool) -> Processor:
    """Stamp fields that hold for the whole process.

    Kept out of contextvars so clearing request context never drops them.
    """
    fields = {"service": service, "environment": environment, "demo_mode": demo_mode}

    def add_service_fields(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service_fields


def setup_logging(
    settings: Settings | None = None,
    *,
    service_name: str | None = None,
    log_format: Literal["json", "console"] | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        settings: Source of service name, environment, demo mode, format and
                  level. Defaults to the cached application settings.
        service_name: Overrides settings.service_name.
        log_format: Overrides settings.log_format. When neither is set,
                    production logs JSON and everything else the console.
        log_level: Overrides settings.log_level.
    """
    settings = settings or get_settings()
    service_name = service_name or settings.service_name
    log_level = (log_level or settings.log_level).upper()
    log_format = log_format or settings.log_format
    if log_format is None:
        log_format = "json" if settings.environment == "production" else "console"

    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    library_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(library_level, numeric_level))

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        service_fields(service_name, settings.environment, settings.demo_mode),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=False),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.rich_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.get_logger().info(
        "logging_initialized",
        log_format=log_format,
        log_level=log_level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
