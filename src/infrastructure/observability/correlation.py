"""Correlation IDs for tracing one governance request through the core.

The ID lives in a ContextVar, so it follows a request across ``await``
points (a vote cast, its unit of work, its audit emission) without being
threaded through service signatures. ``correlation_id_processor`` copies it
onto every structlog entry.

Usage:
    with correlation_scope(request_correlation_id):
        await ledger.cast_vote(...)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("balloting_correlation_id", default="")


def get_correlation_id() -> str:
    """Current correlation ID, or an empty string outside any scope."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation ID for the duration of the block.

    Args:
        correlation_id: ID supplied by the caller; a UUID4 is generated
            when omitted.

    Yields:
        The ID in effect inside the block. The outer ID is restored on exit.
    """
    token = _correlation_id.set(correlation_id or str(uuid4()))
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add ``correlation_id`` to the event when one is bound."""
    correlation_id = _correlation_id.get()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
