"""PostgreSQL engine and session factory for the governance store.

The schema comes from the SQL files in ``migrations/``; this module only
opens connections to it.

Environment Variables:
- DATABASE_URL: postgres[ql]://user:password@host:port/database. The
  driver is forced to asyncpg.
- DATABASE_POOL_SIZE: Connections kept open (default 5)
- DATABASE_MAX_OVERFLOW: Extra connections allowed under load (default 10)
- SQLALCHEMY_ECHO: "1", "true" or "yes" to log emitted SQL

Usage:
    from src.bootstrap.database import get_session_factory
    from src.infrastructure.adapters.persistence import PostgresGovernanceStore

    store = PostgresGovernanceStore(get_session_factory())
"""

from __future__ import annotations

import os

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger(__name__)

ASYNC_DRIVER = "postgresql+asyncpg"

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_database_url() -> str:
    """Read DATABASE_URL and rewrite its scheme to the asyncpg driver.

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    raw = os.environ.get("DATABASE_URL")
    if not raw:
        raise ValueError("DATABASE_URL is not set; the PostgreSQL governance store needs it")

    scheme, separator, rest = raw.partition("://")
    if not separator:
        return f"{ASYNC_DRIVER}://{raw}"
    if scheme in ("postgres", "postgresql"):
        return f"{ASYNC_DRIVER}://{rest}"
    return raw


def _int_env(key: str, default: int) -> int:
    value = os.environ.get(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory over a lazily created engine; one per process.

    Raises:
        ValueError: If DATABASE_URL or a pool setting is invalid.
    """
    global _engine, _session_factory
    if _session_factory is not None:
        return _session_factory

    url = get_database_url()
    pool_size = _int_env("DATABASE_POOL_SIZE", 5)
    max_overflow = _int_env("DATABASE_MAX_OVERFLOW", 10)
    logger.info(
        "database_engine_creating",
        url=make_url(url).render_as_string(hide_password=True),
        pool_size=pool_size,
        max_overflow=max_overflow,
    )

    _engine = create_async_engine(
        url,
        echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )
    _session_factory = async_sessionmaker(bind=_engine, expire_on_commit=False)
    return _session_factory


def reset_database_bootstrap() -> None:
    """Forget the engine and factory (tests)."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None


async def close_database_engine() -> None:
    """Dispose of pooled connections at shutdown."""
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    logger.info("database_engine_closed")
    _engine = None
    _session_factory = None
