"""Configuration des logs (structlog au-dessus du logging stdlib)."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SERVICE_NAME = "inventory"


def _static_fields(release: str | None):
    """Ajoute service/release à chaque ligne, quel que soit le thread."""

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        if release:
            event_dict.setdefault("release", release)
        return event_dict

    return processor


def setup_stdlib_logging(level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level.upper())
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_structlog(environment: str, release: str | None = None) -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        _static_fields(release),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # JSON en prod, lisible en dev
    if environment.lower() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str = "info", environment: str = "development", release: str | None = None) -> None:
    setup_stdlib_logging(level)
    setup_structlog(environment, release)


def bind_request_id(request_id: str) -> None:
    structlog.contextvars.bind_contextvars(rid=request_id)


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars("rid")
