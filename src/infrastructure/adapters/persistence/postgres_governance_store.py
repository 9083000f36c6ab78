"""PostgreSQL implementation of GovernanceStoreProtocol.

Each unit of work is one AsyncSession inside one database transaction.
The transaction commits when the ``async with`` block exits normally and
rolls back when it raises; row locks taken with ``for_update`` are held
until then.

Usage:
    from src.bootstrap.database import get_session_factory

    store = PostgresGovernanceStore(get_session_factory())
    async with store.transaction() as uow:
        balloting = await uow.ballotings.get(balloting_id, for_update=True)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.infrastructure.adapters.persistence.postgres_repositories import (
    PostgresAcceptanceRepository,
    PostgresBallotingRepository,
    PostgresChangeRequestRepository,
    PostgresFDARSRecommendationRepository,
    PostgresMeetingRepository,
    PostgresNSBResponseRepository,
    PostgresVoteRepository,
)

logger = get_logger(__name__)


class PostgresUnitOfWork:
    """Repositories sharing one session and transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.ballotings = PostgresBallotingRepository(session)
        self.votes = PostgresVoteRepository(session)
        self.nsb_responses = PostgresNSBResponseRepository(session)
        self.change_requests = PostgresChangeRequestRepository(session)
        self.acceptances = PostgresAcceptanceRepository(session)
        self.fdars_recommendations = PostgresFDARSRecommendationRepository(session)
        self.meetings = PostgresMeetingRepository(session)


class PostgresGovernanceStore:
    """GovernanceStoreProtocol backed by PostgreSQL via SQLAlchemy async + asyncpg."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            session_factory: Factory from src.bootstrap.database.
        """
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PostgresUnitOfWork]:
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    yield PostgresUnitOfWork(session)
            except Exception as exc:
                logger.debug(
                    "governance_transaction_rolled_back",
                    error_type=type(exc).__name__,
                )
                raise
