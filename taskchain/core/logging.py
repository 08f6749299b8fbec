from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from taskchain.core.config import get_settings

_CONFIGURED = False


def setup_logging(level: int | str | None = None, *, json_logs: bool | None = None) -> None:
    """Configure structlog once for the process.

    JSON lines are emitted everywhere except the local environment, where the
    console renderer is easier to read.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    if level is None:
        level = settings.log_level
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.environment != "local"

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    # request_completed events replace the access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.dict_tracebacks,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
