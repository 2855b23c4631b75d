"""
Step logging for the OG generator.

``print_step`` records one pipeline step (request input, produced output or
an error) as a structured log event. Logging is configured once per process
with ``configure_logging``; JSON output is used in production and a console
renderer everywhere else.
"""
import logging
import logging.config
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from ..core.config import Settings, get_settings

_configured = False


def configure_logging(settings: Optional[Settings] = None, force: bool = False) -> None:
    """Configure structlog and the standard library root logger."""
    global _configured
    if _configured and not force:
        return
    settings = settings or get_settings()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.ENVIRONMENT == "production":
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"plain": {"format": "%(message)s"}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": settings.LOG_LEVEL,
                    "formatter": "plain",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "": {"level": settings.LOG_LEVEL, "handlers": ["console"]},
                "playwright": {"level": "WARNING"},
            },
        }
    )
    _configured = True


_LEVELS = {
    "input": "info",
    "output": "info",
    "info": "info",
    "debug": "debug",
    "warning": "warning",
    "error": "error",
}


def print_step(step: str, data: Any = None, step_type: str = "info") -> None:
    """
    Log a named pipeline step.

    Args:
        step: Short title of the step, e.g. "OG Image Request"
        data: Details for the step; dicts are flattened into the event
        step_type: One of input, output, info, debug, warning, error
    """
    logger = structlog.get_logger("annur_og")
    log = getattr(logger, _LEVELS.get(step_type, "info"))
    if isinstance(data, dict):
        log(step, step_type=step_type, **data)
    elif data is None:
        log(step, step_type=step_type)
    else:
        log(step, step_type=step_type, detail=data)
