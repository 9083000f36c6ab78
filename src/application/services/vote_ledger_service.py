"""Vote ledger service - casting, revising and tallying member votes.

A member has at most one vote per balloting. Uniqueness is enforced by the
store when the vote is written, never by a read-then-write check, so two
concurrent casts by the same member yield exactly one vote and one
DuplicateVoteError.

The balloting row is read with ``for_update`` in the same unit of work
that writes the vote. A concurrent close therefore orders either before
the cast (which then fails with BallotingClosedError) or after it (and
the vote is counted).
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from src.domain.errors import (
    BallotingClosedError,
    BallotingNotFoundError,
    IneligibleVoterError,
    ProjectMismatchError,
    VoteNotFoundError,
    VotingWindowError,
)
from src.domain.models.audit_trail import AuditAction
from src.domain.models.vote import Vote, VoteChoice, VoteTally

if TYPE_CHECKING:
    from src.application.ports.governance_store import (
        GovernanceStoreProtocol,
        GovernanceUnitOfWorkProtocol,
    )
    from src.application.ports.member_eligibility import MemberEligibilityProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.audit_trail_recorder import AuditTrailRecorder
    from src.domain.models.balloting import Balloting

logger = get_logger(__name__)

_RESOURCE = "vote"


class VoteLedgerService:
    """Records votes on balloting rounds and aggregates them.

    Example:
        >>> ledger = VoteLedgerService(store, time_authority, audit)
        >>> vote = await ledger.cast_vote(
        ...     balloting_id, "PRJ-001", "member-7", "approve", "", actor_id="member-7"
        ... )
        >>> tally = await ledger.tally_votes(balloting_id)
    """

    def __init__(
        self,
        store: GovernanceStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        audit: AuditTrailRecorder,
        eligibility: MemberEligibilityProtocol | None = None,
    ) -> None:
        """Initialize the vote ledger.

        Args:
            store: Transactional governance store.
            time_authority: Clock used for cast/revision timestamps.
            audit: Audit trail recorder.
            eligibility: Optional electorate source. When given, only
                eligible members may cast votes.
        """
        self._store = store
        self._time = time_authority
        self._audit = audit
        self._eligibility = eligibility

    async def cast_vote(
        self,
        balloting_id: UUID,
        project_id: str,
        member_id: str,
        choice: VoteChoice | str,
        comment: str,
        actor_id: str,
    ) -> Vote:
        """Cast a member's vote on an open balloting.

        Args:
            balloting_id: The balloting round.
            project_id: The project the caller believes is being balloted.
            member_id: The voting member.
            choice: APPROVE, DISAPPROVE or ABSTAIN (case-insensitive string
                or enum member).
            comment: Optional comment.
            actor_id: Who performs the call.

        Returns:
            The recorded Vote.

        Raises:
            InvalidChoiceError: Choice not recognised.
            BallotingNotFoundError: No such balloting.
            ProjectMismatchError: project_id differs from the balloting's.
            IneligibleVoterError: Member not eligible for the project.
            BallotingClosedError: Balloting is not OPEN.
            VotingWindowError: Now is outside the voting window.
            DuplicateVoteError: Member already voted in this balloting.
        """
        log = logger.bind(
            balloting_id=str(balloting_id),
            project_id=project_id,
            member_id=member_id,
            actor_id=actor_id,
        )

        async with self._audit.track(
            actor_id,
            AuditAction.VOTE_SUBMIT,
            _RESOURCE,
            balloting_id=str(balloting_id),
            project_id=project_id,
            member_id=member_id,
        ) as scope:
            parsed_choice = VoteChoice.parse(choice)

            async with self._store.transaction() as uow:
                balloting = await self._require_balloting(
                    uow, balloting_id, for_update=True
                )
                if balloting.project_id != project_id:
                    raise ProjectMismatchError(
                        balloting_id, balloting.project_id, project_id
                    )
                if self._eligibility is not None:
                    eligible = await self._eligibility.eligible_member_ids(project_id)
                    if member_id not in eligible:
                        raise IneligibleVoterError(member_id, project_id)
                if not balloting.is_open:
                    raise BallotingClosedError(balloting_id, balloting.status)

                now = self._time.now()
                if not balloting.accepts_votes_at(now):
                    window_start, window_end = balloting.voting_window
                    raise VotingWindowError(balloting_id, now, window_start, window_end)

                vote = Vote.cast(
                    balloting_id=balloting_id,
                    project_id=project_id,
                    member_id=member_id,
                    choice=parsed_choice,
                    comment=comment,
                    cast_at=now,
                )
                await uow.votes.add(vote)

            scope.resource_id = str(vote.id)
            scope.metadata["choice"] = vote.choice.value

        log.info("vote_cast", vote_id=str(vote.id), choice=vote.choice.value)
        return vote

    async def update_vote(
        self,
        vote_id: UUID,
        choice: VoteChoice | str,
        comment: str,
        actor_id: str,
    ) -> Vote:
        """Revise the choice and comment of an existing vote.

        Voter, balloting, project and cast-at are preserved.

        Raises:
            InvalidChoiceError: Choice not recognised.
            VoteNotFoundError: No such vote.
            BallotingClosedError: The vote's balloting is not OPEN.
        """
        async with self._audit.track(
            actor_id, AuditAction.VOTE_UPDATE, _RESOURCE, str(vote_id)
        ) as scope:
            parsed_choice = VoteChoice.parse(choice)

            async with self._store.transaction() as uow:
                vote = await self._require_vote(uow, vote_id)
                await self._require_open_for(uow, vote)
                revised = vote.revise(parsed_choice, comment, self._time.now())
                await uow.votes.update(revised)

            scope.metadata["choice"] = revised.choice.value

        logger.info(
            "vote_updated",
            vote_id=str(vote_id),
            actor_id=actor_id,
            choice=revised.choice.value,
        )
        return revised

    async def delete_vote(self, vote_id: UUID, actor_id: str) -> None:
        """Withdraw a vote while its balloting is open.

        Raises:
            VoteNotFoundError: No such vote.
            BallotingClosedError: The vote's balloting is not OPEN.
        """
        async with self._audit.track(
            actor_id, AuditAction.VOTE_DELETE, _RESOURCE, str(vote_id)
        ):
            async with self._store.transaction() as uow:
                vote = await self._require_vote(uow, vote_id)
                await self._require_open_for(uow, vote)
                await uow.votes.delete(vote_id)

        logger.info("vote_deleted", vote_id=str(vote_id), actor_id=actor_id)

    async def get_vote(self, vote_id: UUID) -> Vote:
        """Raises VoteNotFoundError if the vote does not exist."""
        async with self._store.transaction() as uow:
            return await self._require_vote(uow, vote_id)

    async def tally_votes(self, balloting_id: UUID) -> VoteTally:
        """Aggregate the committed votes of a balloting.

        An unknown or empty balloting yields an all-zero tally.
        """
        async with self._store.transaction() as uow:
            votes = await uow.votes.list_by_balloting(balloting_id)
        return VoteTally.from_votes(balloting_id, votes)

    async def count_votes_by_balloting(self, balloting_id: UUID) -> int:
        async with self._store.transaction() as uow:
            return await uow.votes.count_by_balloting(balloting_id)

    async def find_votes_by_balloting_id(self, balloting_id: UUID) -> list[Vote]:
        async with self._store.transaction() as uow:
            return await uow.votes.list_by_balloting(balloting_id)

    async def find_votes_by_member_id(self, member_id: str) -> list[Vote]:
        async with self._store.transaction() as uow:
            return await uow.votes.list_by_member(member_id)

    async def find_by_project_id(self, project_id: str) -> list[Vote]:
        async with self._store.transaction() as uow:
            return await uow.votes.list_by_project(project_id)

    async def _require_balloting(
        self,
        uow: GovernanceUnitOfWorkProtocol,
        balloting_id: UUID,
        *,
        for_update: bool = False,
    ) -> Balloting:
        balloting = await uow.ballotings.get(balloting_id, for_update=for_update)
        if balloting is None:
            raise BallotingNotFoundError(balloting_id)
        return balloting

    async def _require_vote(
        self, uow: GovernanceUnitOfWorkProtocol, vote_id: UUID
    ) -> Vote:
        vote = await uow.votes.get(vote_id)
        if vote is None:
            raise VoteNotFoundError(vote_id)
        return vote

    async def _require_open_for(
        self, uow: GovernanceUnitOfWorkProtocol, vote: Vote
    ) -> None:
        # Lock the balloting so a concurrent close cannot interleave.
        balloting = await self._require_balloting(
            uow, vote.balloting_id, for_update=True
        )
        if not balloting.is_open:
            raise BallotingClosedError(vote.balloting_id, balloting.status)
