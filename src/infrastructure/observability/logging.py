"""structlog configuration for the balloting core.

Production writes one JSON object per line with exceptions rendered as
structured tracebacks; any other environment gets colored console output.
Each entry carries ``service``, the level, an ISO timestamp and, inside a
correlation scope, ``correlation_id``:

    {"event": "vote_cast", "balloting_id": "...", "member_id": "m-7",
     "service": "balloting-core", "level": "info",
     "timestamp": "...", "correlation_id": "..."}

Environment Variables:
- LOG_LEVEL: Minimum level name (default INFO; unknown names fall back to INFO)
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from src.infrastructure.observability.correlation import correlation_id_processor

SERVICE_NAME = "balloting-core"
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def _add_service(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _processors(environment: str) -> list[Processor]:
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        cast(Processor, _add_service),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
    ]
    if environment == "production":
        return [
            *shared,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    return [*shared, structlog.dev.ConsoleRenderer(colors=True)]


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once at process start.

    Args:
        environment: 'production' for JSON lines, anything else for console.
    """
    structlog.configure(
        processors=_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
