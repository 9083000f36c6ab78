"""In-memory stub for GovernanceStoreProtocol.

This stub provides an in-memory implementation for testing and
development. It simulates the database behavior including:
- Serializable units of work (one asyncio.Lock held per transaction)
- Commit on normal exit, rollback on exception (writes are staged on a
  copy of the tables and only published on commit)
- Unique constraints: (balloting_id, member_id) on votes,
  (project_id, responder_id) on NSB responses, one PENDING change request
  per response, (project_id, version) on acceptance snapshots
- Version compare-and-swap on FDARS recommendations

WARNING: This stub is NOT for production use.
Production implementation: src/infrastructure/adapters/persistence/
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

from src.domain.errors import (
    ConcurrentModificationError,
    DuplicateChangeRequestError,
    DuplicateResponseError,
    DuplicateVoteError,
)
from src.domain.models.acceptance import Acceptance
from src.domain.models.balloting import Balloting
from src.domain.models.fdars_recommendation import FDARSRecommendation
from src.domain.models.meeting import Meeting
from src.domain.models.nsb_response import (
    NSBResponse,
    NSBResponseChangeRequest,
    NSBResponseType,
)
from src.domain.models.vote import Vote


@dataclass
class _Tables:
    """All stored rows. Values are frozen models, so a shallow copy isolates."""

    ballotings: dict[UUID, Balloting] = field(default_factory=dict)
    votes: dict[UUID, Vote] = field(default_factory=dict)
    nsb_responses: dict[UUID, NSBResponse] = field(default_factory=dict)
    change_requests: dict[UUID, NSBResponseChangeRequest] = field(default_factory=dict)
    acceptances: dict[UUID, Acceptance] = field(default_factory=dict)
    fdars_recommendations: dict[str, FDARSRecommendation] = field(default_factory=dict)
    meetings: dict[UUID, Meeting] = field(default_factory=dict)

    def copy(self) -> _Tables:
        return _Tables(
            ballotings=dict(self.ballotings),
            votes=dict(self.votes),
            nsb_responses=dict(self.nsb_responses),
            change_requests=dict(self.change_requests),
            acceptances=dict(self.acceptances),
            fdars_recommendations=dict(self.fdars_recommendations),
            meetings=dict(self.meetings),
        )


class BallotingRepositoryStub:
    """In-memory BallotingRepositoryProtocol bound to one unit of work."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, balloting: Balloting) -> None:
        self._tables.ballotings[balloting.id] = balloting

    async def get(self, balloting_id: UUID, *, for_update: bool = False) -> Balloting | None:
        # The unit of work already holds the store lock.
        return self._tables.ballotings.get(balloting_id)

    async def update(self, balloting: Balloting) -> None:
        self._tables.ballotings[balloting.id] = balloting

    async def delete(self, balloting_id: UUID) -> None:
        self._tables.ballotings.pop(balloting_id, None)

    async def list_all(self) -> list[Balloting]:
        return sorted(
            self._tables.ballotings.values(), key=lambda b: b.created_at, reverse=True
        )

    async def list_by_project(self, project_id: str) -> list[Balloting]:
        return [b for b in await self.list_all() if b.project_id == project_id]

    async def find_overlapping(
        self, range_start: datetime, range_end: datetime
    ) -> list[Balloting]:
        return sorted(
            (
                b
                for b in self._tables.ballotings.values()
                if b.start_date < range_end and b.end_date >= range_start
            ),
            key=lambda b: b.start_date,
        )


class VoteRepositoryStub:
    """In-memory VoteRepositoryProtocol bound to one unit of work."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, vote: Vote) -> None:
        for existing in self._tables.votes.values():
            if (
                existing.balloting_id == vote.balloting_id
                and existing.member_id == vote.member_id
            ):
                raise DuplicateVoteError(vote.balloting_id, vote.member_id)
        self._tables.votes[vote.id] = vote

    async def get(self, vote_id: UUID) -> Vote | None:
        return self._tables.votes.get(vote_id)

    async def update(self, vote: Vote) -> None:
        self._tables.votes[vote.id] = vote

    async def delete(self, vote_id: UUID) -> None:
        self._tables.votes.pop(vote_id, None)

    async def list_by_balloting(self, balloting_id: UUID) -> list[Vote]:
        return self._sorted(v for v in self._tables.votes.values() if v.balloting_id == balloting_id)

    async def list_by_member(self, member_id: str) -> list[Vote]:
        return self._sorted(v for v in self._tables.votes.values() if v.member_id == member_id)

    async def list_by_project(self, project_id: str) -> list[Vote]:
        return self._sorted(v for v in self._tables.votes.values() if v.project_id == project_id)

    async def count_by_balloting(self, balloting_id: UUID) -> int:
        return len(await self.list_by_balloting(balloting_id))

    @staticmethod
    def _sorted(votes: Iterable[Vote]) -> list[Vote]:
        return sorted(votes, key=lambda v: v.cast_at)


class NSBResponseRepositoryStub:
    """In-memory NSBResponseRepositoryProtocol bound to one unit of work."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, response: NSBResponse) -> None:
        for existing in self._tables.nsb_responses.values():
            if (
                existing.project_id == response.project_id
                and existing.responder_id == response.responder_id
            ):
                raise DuplicateResponseError(response.project_id, response.responder_id)
        self._tables.nsb_responses[response.id] = response

    async def get(self, response_id: UUID, *, for_update: bool = False) -> NSBResponse | None:
        return self._tables.nsb_responses.get(response_id)

    async def update(self, response: NSBResponse) -> None:
        self._tables.nsb_responses[response.id] = response

    async def list_by_project(self, project_id: str) -> list[NSBResponse]:
        return sorted(
            (r for r in self._tables.nsb_responses.values() if r.project_id == project_id),
            key=lambda r: r.submitted_at,
            reverse=True,
        )

    async def count_by_type(self, project_id: str) -> dict[NSBResponseType, int]:
        return dict(
            Counter(
                r.response_type
                for r in self._tables.nsb_responses.values()
                if r.project_id == project_id
            )
        )


class NSBResponseChangeRequestRepositoryStub:
    """In-memory NSBResponseChangeRequestRepositoryProtocol."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, request: NSBResponseChangeRequest) -> None:
        for existing in self._tables.change_requests.values():
            if existing.response_id == request.response_id and existing.is_pending:
                raise DuplicateChangeRequestError(request.response_id)
        self._tables.change_requests[request.id] = request

    async def get(
        self, request_id: UUID, *, for_update: bool = False
    ) -> NSBResponseChangeRequest | None:
        return self._tables.change_requests.get(request_id)

    async def update(self, request: NSBResponseChangeRequest) -> None:
        self._tables.change_requests[request.id] = request

    async def list_by_response(self, response_id: UUID) -> list[NSBResponseChangeRequest]:
        return sorted(
            (
                r
                for r in self._tables.change_requests.values()
                if r.response_id == response_id
            ),
            key=lambda r: r.created_at,
        )


class AcceptanceRepositoryStub:
    """In-memory AcceptanceRepositoryProtocol bound to one unit of work."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, acceptance: Acceptance) -> None:
        for existing in self._tables.acceptances.values():
            if (
                existing.project_id == acceptance.project_id
                and existing.version == acceptance.version
            ):
                raise ConcurrentModificationError(
                    "acceptance",
                    acceptance.project_id,
                    acceptance.version - 1,
                    existing.version,
                )
        self._tables.acceptances[acceptance.id] = acceptance

    async def get(self, acceptance_id: UUID, *, for_update: bool = False) -> Acceptance | None:
        return self._tables.acceptances.get(acceptance_id)

    async def get_latest(
        self, project_id: str, *, for_update: bool = False
    ) -> Acceptance | None:
        history = await self.list_by_project(project_id)
        return history[-1] if history else None

    async def update(self, acceptance: Acceptance) -> None:
        stored = self._tables.acceptances.get(acceptance.id)
        if stored is None or stored.is_decided:
            raise ConcurrentModificationError(
                "acceptance",
                acceptance.project_id,
                acceptance.version,
                stored.version if stored is not None else 0,
            )
        self._tables.acceptances[acceptance.id] = acceptance

    async def list_by_project(self, project_id: str) -> list[Acceptance]:
        return sorted(
            (a for a in self._tables.acceptances.values() if a.project_id == project_id),
            key=lambda a: a.version,
        )


class FDARSRecommendationRepositoryStub:
    """In-memory FDARSRecommendationRepositoryProtocol with version CAS."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def get(
        self, project_id: str, *, for_update: bool = False
    ) -> FDARSRecommendation | None:
        return self._tables.fdars_recommendations.get(project_id)

    async def save(
        self, recommendation: FDARSRecommendation, expected_version: int | None
    ) -> None:
        stored = self._tables.fdars_recommendations.get(recommendation.project_id)
        actual = stored.version if stored is not None else None
        if actual != expected_version:
            raise ConcurrentModificationError(
                "fdars_recommendation",
                recommendation.project_id,
                expected_version or 0,
                actual or 0,
            )
        self._tables.fdars_recommendations[recommendation.project_id] = recommendation


class MeetingRepositoryStub:
    """In-memory MeetingRepositoryProtocol bound to one unit of work."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def add(self, meeting: Meeting) -> None:
        self._tables.meetings[meeting.id] = meeting

    async def get(self, meeting_id: UUID, *, for_update: bool = False) -> Meeting | None:
        return self._tables.meetings.get(meeting_id)

    async def update(self, meeting: Meeting) -> None:
        self._tables.meetings[meeting.id] = meeting


class InMemoryUnitOfWork:
    """Repositories over one staged copy of the tables."""

    def __init__(self, tables: _Tables) -> None:
        self.ballotings = BallotingRepositoryStub(tables)
        self.votes = VoteRepositoryStub(tables)
        self.nsb_responses = NSBResponseRepositoryStub(tables)
        self.change_requests = NSBResponseChangeRequestRepositoryStub(tables)
        self.acceptances = AcceptanceRepositoryStub(tables)
        self.fdars_recommendations = FDARSRecommendationRepositoryStub(tables)
        self.meetings = MeetingRepositoryStub(tables)


class InMemoryGovernanceStore:
    """In-memory stub implementation of GovernanceStoreProtocol.

    Units of work are fully serialized by a single asyncio.Lock, which is
    at least as strong as the row locks the PostgreSQL store takes.

    Example:
        >>> store = InMemoryGovernanceStore()
        >>> async with store.transaction() as uow:
        ...     await uow.ballotings.add(balloting)
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._tables = _Tables()
        self.commit_count = 0
        self.rollback_count = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[InMemoryUnitOfWork]:
        async with self._lock:
            staged = self._tables.copy()
            try:
                yield InMemoryUnitOfWork(staged)
            except BaseException:
                self.rollback_count += 1
                raise
            self._tables = staged
            self.commit_count += 1

    def clear(self) -> None:
        """Drop all stored rows (for test cleanup)."""
        self._tables = _Tables()

    # Test inspection helpers (read committed state without a transaction)

    def committed_votes(self) -> list[Vote]:
        return list(self._tables.votes.values())

    def committed_balloting(self, balloting_id: UUID) -> Balloting | None:
        return self._tables.ballotings.get(balloting_id)

    def committed_acceptances(self) -> list[Acceptance]:
        return sorted(self._tables.acceptances.values(), key=lambda a: a.version)

    def seed_balloting(self, balloting: Balloting) -> None:
        """Insert a balloting directly, bypassing the lifecycle (for tests)."""
        self._tables.ballotings[balloting.id] = balloting

    def seed_acceptance(self, acceptance: Acceptance) -> None:
        self._tables.acceptances[acceptance.id] = acceptance

    def seed_meeting(self, meeting: Meeting) -> None:
        self._tables.meetings[meeting.id] = meeting

    def force_balloting_fields(self, balloting_id: UUID, **changes: object) -> None:
        """Overwrite fields of a stored balloting (for tests)."""
        current = self._tables.ballotings[balloting_id]
        self._tables.ballotings[balloting_id] = replace(current, **changes)  # type: ignore[arg-type]
