"""Governance store port - transactional unit of work over all repositories.

Every mutating operation in the core runs inside exactly one unit of work:

    async with store.transaction() as uow:
        balloting = await uow.ballotings.get(balloting_id, for_update=True)
        ...

The unit of work commits when the block exits normally and rolls back
when it raises. Implementations must give each unit of work an isolation
at least as strong as row locks on everything read with ``for_update``,
and must enforce the uniqueness constraints declared by the repositories
at write time.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.application.ports.acceptance_repository import AcceptanceRepositoryProtocol
    from src.application.ports.balloting_repository import BallotingRepositoryProtocol
    from src.application.ports.fdars_recommendation_repository import (
        FDARSRecommendationRepositoryProtocol,
    )
    from src.application.ports.meeting_repository import MeetingRepositoryProtocol
    from src.application.ports.nsb_response_repository import (
        NSBResponseChangeRequestRepositoryProtocol,
        NSBResponseRepositoryProtocol,
    )
    from src.application.ports.vote_repository import VoteRepositoryProtocol


class GovernanceUnitOfWorkProtocol(Protocol):
    """Repositories bound to a single transaction."""

    ballotings: BallotingRepositoryProtocol
    votes: VoteRepositoryProtocol
    nsb_responses: NSBResponseRepositoryProtocol
    change_requests: NSBResponseChangeRequestRepositoryProtocol
    acceptances: AcceptanceRepositoryProtocol
    fdars_recommendations: FDARSRecommendationRepositoryProtocol
    meetings: MeetingRepositoryProtocol


class GovernanceStoreProtocol(Protocol):
    """Factory for units of work."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[GovernanceUnitOfWorkProtocol]:
        """Open a unit of work; commit on normal exit, roll back on error."""
        ...
