"""PostgreSQL repositories bound to one AsyncSession (one unit of work).

Schema: migrations/001_create_governance_schema.sql.

Uniqueness is enforced with ``INSERT ... ON CONFLICT DO NOTHING RETURNING``:
an insert that returns no row lost a race against the constraint and is
reported with the matching domain error. ``for_update`` reads use
``SELECT ... FOR UPDATE`` and hold the row lock until the unit of work
ends.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import (
    ConcurrentModificationError,
    DuplicateChangeRequestError,
    DuplicateResponseError,
    DuplicateVoteError,
)
from src.domain.models.acceptance import (
    Acceptance,
    AcceptanceCriteriaSnapshot,
    AcceptanceDecision,
)
from src.domain.models.balloting import Balloting, BallotingStatus
from src.domain.models.fdars_recommendation import FDARSRecommendation
from src.domain.models.meeting import Meeting
from src.domain.models.nsb_response import (
    ChangeRequestStatus,
    NSBResponse,
    NSBResponseChangeRequest,
    NSBResponseType,
)
from src.domain.models.vote import Vote, VoteChoice

Row = Mapping[str, Any]


def _lock(for_update: bool) -> str:
    return " FOR UPDATE" if for_update else ""


# ---------------------------------------------------------------------------
# Ballotings
# ---------------------------------------------------------------------------

_BALLOTING_COLUMNS = (
    "id, project_id, start_date, end_date, status, created_by, created_at, updated_at"
)


def _balloting_from_row(row: Row) -> Balloting:
    return Balloting(
        id=row["id"],
        project_id=row["project_id"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=BallotingStatus(row["status"]),
        created_by=row["created_by"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _balloting_params(balloting: Balloting) -> dict[str, Any]:
    return {
        "id": balloting.id,
        "project_id": balloting.project_id,
        "start_date": balloting.start_date,
        "end_date": balloting.end_date,
        "status": balloting.status.value,
        "created_by": balloting.created_by,
        "created_at": balloting.created_at,
        "updated_at": balloting.updated_at,
    }


class PostgresBallotingRepository:
    """BallotingRepositoryProtocol over the ``ballotings`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, balloting: Balloting) -> None:
        await self._session.execute(
            text(f"""
                INSERT INTO ballotings ({_BALLOTING_COLUMNS})
                VALUES (:id, :project_id, :start_date, :end_date, :status,
                        :created_by, :created_at, :updated_at)
            """),
            _balloting_params(balloting),
        )

    async def get(self, balloting_id: UUID, *, for_update: bool = False) -> Balloting | None:
        result = await self._session.execute(
            text(
                f"SELECT {_BALLOTING_COLUMNS} FROM ballotings WHERE id = :id"
                + _lock(for_update)
            ),
            {"id": balloting_id},
        )
        row = result.mappings().fetchone()
        return _balloting_from_row(row) if row is not None else None

    async def update(self, balloting: Balloting) -> None:
        await self._session.execute(
            text("""
                UPDATE ballotings
                SET start_date = :start_date, end_date = :end_date,
                    status = :status, updated_at = :updated_at
                WHERE id = :id
            """),
            _balloting_params(balloting),
        )

    async def delete(self, balloting_id: UUID) -> None:
        await self._session.execute(
            text("DELETE FROM ballotings WHERE id = :id"), {"id": balloting_id}
        )

    async def list_all(self) -> list[Balloting]:
        result = await self._session.execute(
            text(f"SELECT {_BALLOTING_COLUMNS} FROM ballotings ORDER BY created_at DESC")
        )
        return [_balloting_from_row(row) for row in result.mappings()]

    async def list_by_project(self, project_id: str) -> list[Balloting]:
        result = await self._session.execute(
            text(f"""
                SELECT {_BALLOTING_COLUMNS} FROM ballotings
                WHERE project_id = :project_id
                ORDER BY created_at DESC
            """),
            {"project_id": project_id},
        )
        return [_balloting_from_row(row) for row in result.mappings()]

    async def find_overlapping(
        self, range_start: datetime, range_end: datetime
    ) -> list[Balloting]:
        result = await self._session.execute(
            text(f"""
                SELECT {_BALLOTING_COLUMNS} FROM ballotings
                WHERE start_date < :range_end AND end_date >= :range_start
                ORDER BY start_date
            """),
            {"range_start": range_start, "range_end": range_end},
        )
        return [_balloting_from_row(row) for row in result.mappings()]


# ---------------------------------------------------------------------------
# Votes
# ---------------------------------------------------------------------------

_VOTE_COLUMNS = (
    "id, balloting_id, project_id, member_id, choice, comment, cast_at, updated_at"
)


def _vote_from_row(row: Row) -> Vote:
    return Vote(
        id=row["id"],
        balloting_id=row["balloting_id"],
        project_id=row["project_id"],
        member_id=row["member_id"],
        choice=VoteChoice(row["choice"]),
        comment=row["comment"],
        cast_at=row["cast_at"],
        updated_at=row["updated_at"],
    )


class PostgresVoteRepository:
    """VoteRepositoryProtocol over the ``votes`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, vote: Vote) -> None:
        result = await self._session.execute(
            text(f"""
                INSERT INTO votes ({_VOTE_COLUMNS})
                VALUES (:id, :balloting_id, :project_id, :member_id, :choice,
                        :comment, :cast_at, :updated_at)
                ON CONFLICT (balloting_id, member_id) DO NOTHING
                RETURNING id
            """),
            {
                "id": vote.id,
                "balloting_id": vote.balloting_id,
                "project_id": vote.project_id,
                "member_id": vote.member_id,
                "choice": vote.choice.value,
                "comment": vote.comment,
                "cast_at": vote.cast_at,
                "updated_at": vote.updated_at,
            },
        )
        if result.scalar() is None:
            raise DuplicateVoteError(vote.balloting_id, vote.member_id)

    async def get(self, vote_id: UUID) -> Vote | None:
        result = await self._session.execute(
            text(f"SELECT {_VOTE_COLUMNS} FROM votes WHERE id = :id"), {"id": vote_id}
        )
        row = result.mappings().fetchone()
        return _vote_from_row(row) if row is not None else None

    async def update(self, vote: Vote) -> None:
        # Identity columns are never written after insert.
        await self._session.execute(
            text("""
                UPDATE votes
                SET choice = :choice, comment = :comment, updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": vote.id,
                "choice": vote.choice.value,
                "comment": vote.comment,
                "updated_at": vote.updated_at,
            },
        )

    async def delete(self, vote_id: UUID) -> None:
        await self._session.execute(
            text("DELETE FROM votes WHERE id = :id"), {"id": vote_id}
        )

    async def list_by_balloting(self, balloting_id: UUID) -> list[Vote]:
        return await self._list("balloting_id", balloting_id)

    async def list_by_member(self, member_id: str) -> list[Vote]:
        return await self._list("member_id", member_id)

    async def list_by_project(self, project_id: str) -> list[Vote]:
        return await self._list("project_id", project_id)

    async def count_by_balloting(self, balloting_id: UUID) -> int:
        result = await self._session.execute(
            text("SELECT COUNT(*) FROM votes WHERE balloting_id = :balloting_id"),
            {"balloting_id": balloting_id},
        )
        return result.scalar() or 0

    async def _list(self, column: str, value: object) -> list[Vote]:
        result = await self._session.execute(
            text(
                f"SELECT {_VOTE_COLUMNS} FROM votes WHERE {column} = :value ORDER BY cast_at"
            ),
            {"value": value},
        )
        return [_vote_from_row(row) for row in result.mappings()]


# ---------------------------------------------------------------------------
# NSB responses and change requests
# ---------------------------------------------------------------------------

_RESPONSE_COLUMNS = (
    "id, project_id, responder_id, response_type, comments, "
    "is_committed_to_participate, submitted_at, updated_at"
)


def _response_from_row(row: Row) -> NSBResponse:
    return NSBResponse(
        id=row["id"],
        project_id=row["project_id"],
        responder_id=row["responder_id"],
        response_type=NSBResponseType(row["response_type"]),
        comments=row["comments"],
        is_committed_to_participate=row["is_committed_to_participate"],
        submitted_at=row["submitted_at"],
        updated_at=row["updated_at"],
    )


class PostgresNSBResponseRepository:
    """NSBResponseRepositoryProtocol over the ``nsb_responses`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, response: NSBResponse) -> None:
        result = await self._session.execute(
            text(f"""
                INSERT INTO nsb_responses ({_RESPONSE_COLUMNS})
                VALUES (:id, :project_id, :responder_id, :response_type, :comments,
                        :is_committed_to_participate, :submitted_at, :updated_at)
                ON CONFLICT (project_id, responder_id) DO NOTHING
                RETURNING id
            """),
            {
                "id": response.id,
                "project_id": response.project_id,
                "responder_id": response.responder_id,
                "response_type": response.response_type.value,
                "comments": response.comments,
                "is_committed_to_participate": response.is_committed_to_participate,
                "submitted_at": response.submitted_at,
                "updated_at": response.updated_at,
            },
        )
        if result.scalar() is None:
            raise DuplicateResponseError(response.project_id, response.responder_id)

    async def get(self, response_id: UUID, *, for_update: bool = False) -> NSBResponse | None:
        result = await self._session.execute(
            text(
                f"SELECT {_RESPONSE_COLUMNS} FROM nsb_responses WHERE id = :id"
                + _lock(for_update)
            ),
            {"id": response_id},
        )
        row = result.mappings().fetchone()
        return _response_from_row(row) if row is not None else None

    async def update(self, response: NSBResponse) -> None:
        await self._session.execute(
            text("""
                UPDATE nsb_responses
                SET response_type = :response_type, comments = :comments,
                    is_committed_to_participate = :is_committed_to_participate,
                    updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": response.id,
                "response_type": response.response_type.value,
                "comments": response.comments,
                "is_committed_to_participate": response.is_committed_to_participate,
                "updated_at": response.updated_at,
            },
        )

    async def list_by_project(self, project_id: str) -> list[NSBResponse]:
        result = await self._session.execute(
            text(f"""
                SELECT {_RESPONSE_COLUMNS} FROM nsb_responses
                WHERE project_id = :project_id
                ORDER BY submitted_at DESC
            """),
            {"project_id": project_id},
        )
        return [_response_from_row(row) for row in result.mappings()]

    async def count_by_type(self, project_id: str) -> dict[NSBResponseType, int]:
        result = await self._session.execute(
            text("""
                SELECT response_type, COUNT(*) AS total
                FROM nsb_responses
                WHERE project_id = :project_id
                GROUP BY response_type
            """),
            {"project_id": project_id},
        )
        return {NSBResponseType(row[0]): row[1] for row in result.fetchall()}


_CHANGE_REQUEST_COLUMNS = (
    "id, response_id, responder_id, requested_type, status, created_at, "
    "reviewed_by, review_comment, reviewed_at"
)


def _change_request_from_row(row: Row) -> NSBResponseChangeRequest:
    return NSBResponseChangeRequest(
        id=row["id"],
        response_id=row["response_id"],
        responder_id=row["responder_id"],
        requested_type=NSBResponseType(row["requested_type"]),
        status=ChangeRequestStatus(row["status"]),
        created_at=row["created_at"],
        reviewed_by=row["reviewed_by"],
        review_comment=row["review_comment"],
        reviewed_at=row["reviewed_at"],
    )


class PostgresChangeRequestRepository:
    """NSBResponseChangeRequestRepositoryProtocol over ``nsb_response_change_requests``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, request: NSBResponseChangeRequest) -> None:
        result = await self._session.execute(
            text(f"""
                INSERT INTO nsb_response_change_requests ({_CHANGE_REQUEST_COLUMNS})
                VALUES (:id, :response_id, :responder_id, :requested_type, :status,
                        :created_at, :reviewed_by, :review_comment, :reviewed_at)
                ON CONFLICT (response_id) WHERE status = 'PENDING' DO NOTHING
                RETURNING id
            """),
            self._params(request),
        )
        if result.scalar() is None:
            raise DuplicateChangeRequestError(request.response_id)

    async def get(
        self, request_id: UUID, *, for_update: bool = False
    ) -> NSBResponseChangeRequest | None:
        result = await self._session.execute(
            text(
                f"SELECT {_CHANGE_REQUEST_COLUMNS} FROM nsb_response_change_requests "
                "WHERE id = :id" + _lock(for_update)
            ),
            {"id": request_id},
        )
        row = result.mappings().fetchone()
        return _change_request_from_row(row) if row is not None else None

    async def update(self, request: NSBResponseChangeRequest) -> None:
        await self._session.execute(
            text("""
                UPDATE nsb_response_change_requests
                SET status = :status, reviewed_by = :reviewed_by,
                    review_comment = :review_comment, reviewed_at = :reviewed_at
                WHERE id = :id
            """),
            self._params(request),
        )

    async def list_by_response(self, response_id: UUID) -> list[NSBResponseChangeRequest]:
        result = await self._session.execute(
            text(f"""
                SELECT {_CHANGE_REQUEST_COLUMNS} FROM nsb_response_change_requests
                WHERE response_id = :response_id
                ORDER BY created_at
            """),
            {"response_id": response_id},
        )
        return [_change_request_from_row(row) for row in result.mappings()]

    @staticmethod
    def _params(request: NSBResponseChangeRequest) -> dict[str, Any]:
        return {
            "id": request.id,
            "response_id": request.response_id,
            "responder_id": request.responder_id,
            "requested_type": request.requested_type.value,
            "status": request.status.value,
            "created_at": request.created_at,
            "reviewed_by": request.reviewed_by,
            "review_comment": request.review_comment,
            "reviewed_at": request.reviewed_at,
        }


# ---------------------------------------------------------------------------
# Acceptance snapshots
# ---------------------------------------------------------------------------

_ACCEPTANCE_COLUMNS = (
    "id, project_id, version, approvals, disapprovals, total_responses, "
    "total_eligible, decision, tc_secretary_id, decided_at, supersedes_id, "
    "created_at, updated_at"
)


def _acceptance_from_row(row: Row) -> Acceptance:
    return Acceptance(
        id=row["id"],
        project_id=row["project_id"],
        version=row["version"],
        snapshot=AcceptanceCriteriaSnapshot(
            approvals=row["approvals"],
            disapprovals=row["disapprovals"],
            total_responses=row["total_responses"],
            total_eligible=row["total_eligible"],
        ),
        decision=AcceptanceDecision(row["decision"]),
        tc_secretary_id=row["tc_secretary_id"],
        decided_at=row["decided_at"],
        supersedes_id=row["supersedes_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _acceptance_params(acceptance: Acceptance) -> dict[str, Any]:
    return {
        "id": acceptance.id,
        "project_id": acceptance.project_id,
        "version": acceptance.version,
        "approvals": acceptance.snapshot.approvals,
        "disapprovals": acceptance.snapshot.disapprovals,
        "total_responses": acceptance.snapshot.total_responses,
        "total_eligible": acceptance.snapshot.total_eligible,
        "decision": acceptance.decision.value,
        "tc_secretary_id": acceptance.tc_secretary_id,
        "decided_at": acceptance.decided_at,
        "supersedes_id": acceptance.supersedes_id,
        "created_at": acceptance.created_at,
        "updated_at": acceptance.updated_at,
    }


class PostgresAcceptanceRepository:
    """AcceptanceRepositoryProtocol over the ``acceptances`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, acceptance: Acceptance) -> None:
        result = await self._session.execute(
            text(f"""
                INSERT INTO acceptances ({_ACCEPTANCE_COLUMNS})
                VALUES (:id, :project_id, :version, :approvals, :disapprovals,
                        :total_responses, :total_eligible, :decision,
                        :tc_secretary_id, :decided_at, :supersedes_id,
                        :created_at, :updated_at)
                ON CONFLICT (project_id, version) DO NOTHING
                RETURNING id
            """),
            _acceptance_params(acceptance),
        )
        if result.scalar() is None:
            raise ConcurrentModificationError(
                "acceptance",
                acceptance.project_id,
                acceptance.version - 1,
                acceptance.version,
            )

    async def get(self, acceptance_id: UUID, *, for_update: bool = False) -> Acceptance | None:
        result = await self._session.execute(
            text(
                f"SELECT {_ACCEPTANCE_COLUMNS} FROM acceptances WHERE id = :id"
                + _lock(for_update)
            ),
            {"id": acceptance_id},
        )
        row = result.mappings().fetchone()
        return _acceptance_from_row(row) if row is not None else None

    async def get_latest(
        self, project_id: str, *, for_update: bool = False
    ) -> Acceptance | None:
        result = await self._session.execute(
            text(
                f"SELECT {_ACCEPTANCE_COLUMNS} FROM acceptances "
                "WHERE project_id = :project_id ORDER BY version DESC LIMIT 1"
                + _lock(for_update)
            ),
            {"project_id": project_id},
        )
        row = result.mappings().fetchone()
        return _acceptance_from_row(row) if row is not None else None

    async def update(self, acceptance: Acceptance) -> None:
        result = await self._session.execute(
            text("""
                UPDATE acceptances
                SET approvals = :approvals, disapprovals = :disapprovals,
                    total_responses = :total_responses,
                    total_eligible = :total_eligible, decision = :decision,
                    tc_secretary_id = :tc_secretary_id, decided_at = :decided_at,
                    updated_at = :updated_at
                WHERE id = :id AND decision = 'PENDING'
                RETURNING id
            """),
            _acceptance_params(acceptance),
        )
        if result.scalar() is None:
            raise ConcurrentModificationError(
                "acceptance", acceptance.project_id, acceptance.version, acceptance.version
            )

    async def list_by_project(self, project_id: str) -> list[Acceptance]:
        result = await self._session.execute(
            text(f"""
                SELECT {_ACCEPTANCE_COLUMNS} FROM acceptances
                WHERE project_id = :project_id
                ORDER BY version
            """),
            {"project_id": project_id},
        )
        return [_acceptance_from_row(row) for row in result.mappings()]


# ---------------------------------------------------------------------------
# FDARS recommendations
# ---------------------------------------------------------------------------

_FDARS_COLUMNS = (
    "project_id, recommended, recommended_by, recommended_at, version, "
    "verified, verified_by, verified_at"
)


def _fdars_from_row(row: Row) -> FDARSRecommendation:
    return FDARSRecommendation(
        project_id=row["project_id"],
        recommended=row["recommended"],
        recommended_by=row["recommended_by"],
        recommended_at=row["recommended_at"],
        version=row["version"],
        verified=row["verified"],
        verified_by=row["verified_by"],
        verified_at=row["verified_at"],
    )


class PostgresFDARSRecommendationRepository:
    """FDARSRecommendationRepositoryProtocol with a version compare-and-swap."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(
        self, project_id: str, *, for_update: bool = False
    ) -> FDARSRecommendation | None:
        result = await self._session.execute(
            text(
                f"SELECT {_FDARS_COLUMNS} FROM fdars_recommendations "
                "WHERE project_id = :project_id" + _lock(for_update)
            ),
            {"project_id": project_id},
        )
        row = result.mappings().fetchone()
        return _fdars_from_row(row) if row is not None else None

    async def save(
        self, recommendation: FDARSRecommendation, expected_version: int | None
    ) -> None:
        params = {
            "project_id": recommendation.project_id,
            "recommended": recommendation.recommended,
            "recommended_by": recommendation.recommended_by,
            "recommended_at": recommendation.recommended_at,
            "version": recommendation.version,
            "verified": recommendation.verified,
            "verified_by": recommendation.verified_by,
            "verified_at": recommendation.verified_at,
        }
        if expected_version is None:
            result = await self._session.execute(
                text(f"""
                    INSERT INTO fdars_recommendations ({_FDARS_COLUMNS})
                    VALUES (:project_id, :recommended, :recommended_by,
                            :recommended_at, :version, :verified, :verified_by,
                            :verified_at)
                    ON CONFLICT (project_id) DO NOTHING
                    RETURNING project_id
                """),
                params,
            )
        else:
            result = await self._session.execute(
                text("""
                    UPDATE fdars_recommendations
                    SET recommended = :recommended, recommended_by = :recommended_by,
                        recommended_at = :recommended_at, version = :version,
                        verified = :verified, verified_by = :verified_by,
                        verified_at = :verified_at
                    WHERE project_id = :project_id AND version = :expected_version
                    RETURNING project_id
                """),
                {**params, "expected_version": expected_version},
            )
        if result.scalar() is None:
            current = await self.get(recommendation.project_id)
            raise ConcurrentModificationError(
                "fdars_recommendation",
                recommendation.project_id,
                expected_version or 0,
                current.version if current is not None else 0,
            )


# ---------------------------------------------------------------------------
# Meetings
# ---------------------------------------------------------------------------

_MEETING_COLUMNS = (
    "id, committee_id, project_id, eligible_member_ids, attendee_ids, "
    "has_quorum, quorum_checked_at"
)


def _meeting_from_row(row: Row) -> Meeting:
    return Meeting(
        id=row["id"],
        committee_id=row["committee_id"],
        project_id=row["project_id"],
        eligible_member_ids=frozenset(row["eligible_member_ids"] or ()),
        attendee_ids=frozenset(row["attendee_ids"] or ()),
        has_quorum=row["has_quorum"],
        quorum_checked_at=row["quorum_checked_at"],
    )


def _meeting_params(meeting: Meeting) -> dict[str, Any]:
    return {
        "id": meeting.id,
        "committee_id": meeting.committee_id,
        "project_id": meeting.project_id,
        "eligible_member_ids": sorted(meeting.eligible_member_ids),
        "attendee_ids": sorted(meeting.attendee_ids),
        "has_quorum": meeting.has_quorum,
        "quorum_checked_at": meeting.quorum_checked_at,
    }


class PostgresMeetingRepository:
    """MeetingRepositoryProtocol over the ``meetings`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, meeting: Meeting) -> None:
        await self._session.execute(
            text(f"""
                INSERT INTO meetings ({_MEETING_COLUMNS})
                VALUES (:id, :committee_id, :project_id, :eligible_member_ids,
                        :attendee_ids, :has_quorum, :quorum_checked_at)
            """),
            _meeting_params(meeting),
        )

    async def get(self, meeting_id: UUID, *, for_update: bool = False) -> Meeting | None:
        result = await self._session.execute(
            text(
                f"SELECT {_MEETING_COLUMNS} FROM meetings WHERE id = :id"
                + _lock(for_update)
            ),
            {"id": meeting_id},
        )
        row = result.mappings().fetchone()
        return _meeting_from_row(row) if row is not None else None

    async def update(self, meeting: Meeting) -> None:
        await self._session.execute(
            text("""
                UPDATE meetings
                SET eligible_member_ids = :eligible_member_ids,
                    attendee_ids = :attendee_ids, has_quorum = :has_quorum,
                    quorum_checked_at = :quorum_checked_at
                WHERE id = :id
            """),
            _meeting_params(meeting),
        )
