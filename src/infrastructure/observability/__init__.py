"""Logging setup and request correlation for the balloting core.

Call ``configure_structlog`` once at process start (``src.bootstrap.logging``
does this from ENVIRONMENT), then wrap each caller request:

    with correlation_scope(request_correlation_id):
        await sessions.close(balloting_id, actor_id="tc-sec")
"""

from src.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    get_correlation_id,
)
from src.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "get_correlation_id",
]
