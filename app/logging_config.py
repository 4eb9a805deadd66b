"""Structured logging configuration using structlog.

``configure_logging`` sets up structlog processors and routes everything
through the stdlib root logger, so records emitted by google-cloud-storage
and uvicorn share the same JSON (production) or console (development)
rendering as the badge handler's own events.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that are chatty at INFO during every storage call.
_QUIET_LOGGERS = ("google.auth", "google.cloud.storage", "urllib3")


def _add_service(service: str) -> structlog.types.Processor:
    def processor(_logger: object, _method: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def configure_logging(
    *,
    json_logs: bool = True,
    log_level: str = "INFO",
    service: str = "build-status-badge",
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_logs: Render JSON lines (Cloud Logging parses these) when
            *True*, a colourful console renderer when *False*.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
        service: Value of the ``service`` key added to every event.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service(service),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
