"""
PostgreSQL fixtures for governance store integration tests.

One PostgreSQL 16 container serves the whole run. Each test gets a
PostgresGovernanceStore over the schema from migrations/, and the tables
are truncated afterwards, since the store commits its own transactions.

Usage:
    pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

    async def test_example(governance_store: PostgresGovernanceStore) -> None:
        async with governance_store.transaction() as uow:
            ...

Note: Docker must be running for these fixtures to work.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from testcontainers.postgres import PostgresContainer

from src.infrastructure.adapters.persistence import PostgresGovernanceStore
from tests.integration.sql_helpers import execute_sql_file

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"

GOVERNANCE_TABLES = (
    "votes",
    "ballotings",
    "nsb_response_change_requests",
    "nsb_responses",
    "acceptances",
    "fdars_recommendations",
    "meetings",
)


@pytest.fixture(scope="session")
def postgres_url() -> Generator[str, None, None]:
    """asyncpg URL of a PostgreSQL 16 container shared by the session."""
    with PostgresContainer("postgres:16-alpine", driver="asyncpg") as postgres:
        yield postgres.get_connection_url()


@pytest.fixture
async def session_factory(
    postgres_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(postgres_url)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)

    async with factory() as session, session.begin():
        for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
            await execute_sql_file(session, path)

    yield factory

    async with factory() as session, session.begin():
        await session.execute(text(f"TRUNCATE {', '.join(GOVERNANCE_TABLES)} CASCADE"))
    await engine.dispose()


@pytest.fixture
def governance_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> PostgresGovernanceStore:
    return PostgresGovernanceStore(session_factory)
