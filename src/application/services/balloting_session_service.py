"""Balloting session service - lifecycle of balloting rounds and FDARS.

Lifecycle: DRAFT -> OPEN -> CLOSED, with CANCELLED reachable from DRAFT
and OPEN. Closing a round produces a BallotingOutcome in the same unit
of work that flips the status, so the tally it reports is exactly the set
of votes committed before the close.

The FDARS (Final Draft African Regional Standard) recommendation is a
two-step recommend/verify workflow per project. Verification runs under
the recommendation's row lock and can be pinned to the version the
verifier read.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from src.domain.errors import (
    BallotingNotFoundError,
    ConcurrentModificationError,
    InvalidQueryRangeError,
    NaiveDatetimeError,
    NoRecommendationError,
    TerminalStateError,
    ThresholdNotConfiguredError,
)
from src.domain.models.audit_trail import AuditAction
from src.domain.models.balloting import END_OF_DAY, Balloting, BallotingStatus
from src.domain.models.balloting_outcome import (
    BallotingDisposition,
    BallotingOutcome,
)
from src.domain.models.fdars_recommendation import FDARSRecommendation
from src.domain.models.quorum import BallotingQuorumSubject
from src.domain.models.vote import VoteChoice, VoteTally
from src.domain.services.acceptance_policy import evaluate_acceptance
from src.domain.services.quorum_policy import evaluate_quorum

if TYPE_CHECKING:
    from src.application.ports.governance_store import (
        GovernanceStoreProtocol,
        GovernanceUnitOfWorkProtocol,
    )
    from src.application.ports.member_eligibility import MemberEligibilityProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.audit_trail_recorder import AuditTrailRecorder
    from src.config.governance_config import GovernanceConfig

logger = get_logger(__name__)

_BALLOTING = "balloting"
_FDARS = "fdars_recommendation"


class BallotingSessionService:
    """Manages balloting rounds and FDARS recommendations.

    Example:
        >>> sessions = BallotingSessionService(
        ...     store, time_authority, audit, eligibility, GovernanceConfig.from_environment()
        ... )
        >>> balloting = await sessions.create("PRJ-001", start, end, actor_id="tc-sec")
        >>> await sessions.open(balloting.id, actor_id="tc-sec")
        >>> outcome = await sessions.close(balloting.id, actor_id="tc-sec")
        >>> outcome.disposition
        <BallotingDisposition.ACCEPT: 'ACCEPT'>
    """

    def __init__(
        self,
        store: GovernanceStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        audit: AuditTrailRecorder,
        eligibility: MemberEligibilityProtocol,
        config: GovernanceConfig,
    ) -> None:
        """Initialize the balloting session service.

        Args:
            store: Transactional governance store.
            time_authority: Clock for all timestamps.
            audit: Audit trail recorder.
            eligibility: Electorate used when a round is closed.
            config: Acceptance criteria and quorum policy.
        """
        self._store = store
        self._time = time_authority
        self._audit = audit
        self._eligibility = eligibility
        self._config = config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create(
        self,
        project_id: str,
        start_date: datetime,
        end_date: datetime,
        actor_id: str,
    ) -> Balloting:
        """Create a DRAFT balloting round.

        Args:
            project_id: Project to ballot.
            start_date: When voting opens.
            end_date: Last day of voting; must be after start_date.
            actor_id: Creator, recorded as created_by.

        Returns:
            The new Balloting.

        Raises:
            InvalidPeriodError: If end_date is not after start_date.
        """
        async with self._audit.track(
            actor_id, AuditAction.BALLOT_CREATE, _BALLOTING, project_id=project_id
        ) as scope:
            balloting = Balloting.create(
                project_id=project_id,
                start_date=start_date,
                end_date=end_date,
                created_by=actor_id,
                created_at=self._time.now(),
            )
            async with self._store.transaction() as uow:
                await uow.ballotings.add(balloting)
            scope.resource_id = str(balloting.id)

        logger.info(
            "balloting_created",
            balloting_id=str(balloting.id),
            project_id=project_id,
            actor_id=actor_id,
        )
        return balloting

    async def update(
        self,
        balloting_id: UUID,
        start_date: datetime,
        end_date: datetime,
        actor_id: str,
    ) -> Balloting:
        """Change the voting period of a round that is not yet terminal.

        Raises:
            BallotingNotFoundError: No such balloting.
            TerminalStateError: The round is CLOSED or CANCELLED.
            InvalidPeriodError: end_date is not after start_date.
        """
        async with self._audit.track(
            actor_id, AuditAction.BALLOT_UPDATE, _BALLOTING, str(balloting_id)
        ):
            async with self._store.transaction() as uow:
                balloting = await self._require(uow, balloting_id, for_update=True)
                updated = balloting.with_period(start_date, end_date, self._time.now())
                await uow.ballotings.update(updated)

        logger.info(
            "balloting_updated", balloting_id=str(balloting_id), actor_id=actor_id
        )
        return updated

    async def open(self, balloting_id: UUID, actor_id: str) -> Balloting:
        """Open a DRAFT round for voting.

        Raises:
            BallotingNotFoundError: No such balloting.
            InvalidStateTransitionError: The round is not DRAFT.
        """
        return await self._transition(
            balloting_id, BallotingStatus.OPEN, AuditAction.BALLOT_OPEN, actor_id
        )

    async def cancel(self, balloting_id: UUID, actor_id: str) -> Balloting:
        """Cancel a DRAFT or OPEN round.

        Raises:
            BallotingNotFoundError: No such balloting.
            InvalidStateTransitionError: The round is already terminal.
        """
        return await self._transition(
            balloting_id,
            BallotingStatus.CANCELLED,
            AuditAction.BALLOT_CANCEL,
            actor_id,
        )

    async def close(self, balloting_id: UUID, actor_id: str) -> BallotingOutcome:
        """Close an OPEN round and decide its outcome.

        Runs as one unit of work: lock the balloting, flip it to CLOSED,
        tally the committed votes, evaluate quorum over distinct eligible
        voters and the acceptance criteria over the tally, and attach the
        project's current FDARS recommendation. Any failure rolls the
        status flip back.

        Returns:
            BallotingOutcome with disposition REFER (no quorum), ACCEPT
            (criteria met) or REJECT.

        Raises:
            ThresholdNotConfiguredError: Acceptance criteria or quorum
                policy is not configured.
            BallotingNotFoundError: No such balloting.
            InvalidStateTransitionError: The round is not OPEN.
            NoEligibleMembersError: Nobody is eligible on the project.
        """
        log = logger.bind(balloting_id=str(balloting_id), actor_id=actor_id)

        async with self._audit.track(
            actor_id, AuditAction.BALLOT_CLOSE, _BALLOTING, str(balloting_id)
        ) as scope:
            criteria = self._config.acceptance_criteria
            if criteria is None:
                raise ThresholdNotConfiguredError("acceptance_criteria")
            quorum_policy = self._config.quorum
            if quorum_policy is None:
                raise ThresholdNotConfiguredError("quorum_required_fraction")

            async with self._store.transaction() as uow:
                balloting = await self._require(uow, balloting_id, for_update=True)
                closed = balloting.with_status(BallotingStatus.CLOSED, self._time.now())
                await uow.ballotings.update(closed)

                votes = await uow.votes.list_by_balloting(balloting_id)
                tally = VoteTally.from_votes(balloting_id, votes)

                eligible = await self._eligibility.eligible_member_ids(
                    balloting.project_id
                )
                subject = BallotingQuorumSubject(balloting_id)
                eligible_votes = [v for v in votes if v.member_id in eligible]
                quorum = evaluate_quorum(
                    len({v.member_id for v in eligible_votes}),
                    len(eligible),
                    quorum_policy,
                    subject.label,
                )
                criteria_result = evaluate_acceptance(
                    approvals=sum(
                        1 for v in eligible_votes if v.choice == VoteChoice.APPROVE
                    ),
                    disapprovals=sum(
                        1 for v in eligible_votes if v.choice == VoteChoice.DISAPPROVE
                    ),
                    total_eligible=len(eligible),
                    criteria=criteria,
                    subject=subject.label,
                )
                recommendation = await uow.fdars_recommendations.get(
                    balloting.project_id
                )

            if not quorum.met:
                disposition = BallotingDisposition.REFER
            elif criteria_result.criteria_met:
                disposition = BallotingDisposition.ACCEPT
            else:
                disposition = BallotingDisposition.REJECT

            scope.metadata.update(
                disposition=disposition.value,
                total_votes=tally.total,
                quorum_met=quorum.met,
            )

        log.info(
            "balloting_closed",
            disposition=disposition.value,
            approve=tally.approve,
            disapprove=tally.disapprove,
            abstain=tally.abstain,
            participating=quorum.participating,
            required=quorum.required,
        )
        return BallotingOutcome(
            balloting=closed,
            tally=tally,
            quorum=quorum,
            criteria=criteria_result,
            disposition=disposition,
            fdars_recommendation=recommendation,
        )

    async def delete(self, balloting_id: UUID, actor_id: str) -> None:
        """Delete a DRAFT round. DRAFT rounds never hold votes.

        Raises:
            BallotingNotFoundError: No such balloting.
            TerminalStateError: The round has left DRAFT.
        """
        async with self._audit.track(
            actor_id, AuditAction.BALLOT_DELETE, _BALLOTING, str(balloting_id)
        ):
            async with self._store.transaction() as uow:
                balloting = await self._require(uow, balloting_id, for_update=True)
                if balloting.status != BallotingStatus.DRAFT:
                    raise TerminalStateError(
                        balloting_id, balloting.status, operation="delete"
                    )
                await uow.ballotings.delete(balloting_id)

        logger.info(
            "balloting_deleted", balloting_id=str(balloting_id), actor_id=actor_id
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, balloting_id: UUID) -> Balloting:
        """Raises BallotingNotFoundError if the balloting does not exist."""
        async with self._store.transaction() as uow:
            return await self._require(uow, balloting_id)

    async def find_all(self) -> list[Balloting]:
        async with self._store.transaction() as uow:
            return await uow.ballotings.list_all()

    async def find_by_project_id(self, project_id: str) -> list[Balloting]:
        async with self._store.transaction() as uow:
            return await uow.ballotings.list_by_project(project_id)

    async def find_by_period(self, start: datetime, end: datetime) -> list[Balloting]:
        """Find rounds whose period intersects ``[start, end]``.

        ``end`` is a calendar day: rounds starting at any time on that day
        match.

        Raises:
            NaiveDatetimeError: If start or end has no timezone.
            InvalidQueryRangeError: If end is before start.
        """
        for name, value in (("start", start), ("end", end)):
            if value.tzinfo is None:
                raise NaiveDatetimeError(name, value)
        if end < start:
            raise InvalidQueryRangeError(start, end)
        async with self._store.transaction() as uow:
            return await uow.ballotings.find_overlapping(start, end + END_OF_DAY)

    # ------------------------------------------------------------------
    # FDARS recommendation
    # ------------------------------------------------------------------

    async def recommend_fdars(
        self, actor_id: str, project_id: str, recommended: bool
    ) -> FDARSRecommendation:
        """Record (or replace) the FDARS recommendation for a project.

        Every call starts a new version with verification cleared.
        """
        async with self._audit.track(
            actor_id,
            AuditAction.FDARS_RECOMMEND,
            _FDARS,
            project_id,
            recommended=recommended,
        ) as scope:
            async with self._store.transaction() as uow:
                current = await uow.fdars_recommendations.get(
                    project_id, for_update=True
                )
                now = self._time.now()
                if current is None:
                    recommendation = FDARSRecommendation(
                        project_id=project_id,
                        recommended=recommended,
                        recommended_by=actor_id,
                        recommended_at=now,
                    )
                    await uow.fdars_recommendations.save(recommendation, None)
                else:
                    recommendation = current.rerecommended(recommended, actor_id, now)
                    await uow.fdars_recommendations.save(
                        recommendation, current.version
                    )
            scope.metadata["version"] = recommendation.version

        logger.info(
            "fdars_recommended",
            project_id=project_id,
            actor_id=actor_id,
            recommended=recommended,
            version=recommendation.version,
        )
        return recommendation

    async def verify_fdars_recommendation(
        self,
        actor_id: str,
        project_id: str,
        expected_version: int | None = None,
    ) -> FDARSRecommendation:
        """Verify the current FDARS recommendation.

        Args:
            actor_id: The verifier.
            project_id: Project whose recommendation is verified.
            expected_version: Version the verifier read. When given and the
                recommendation has since been replaced, verification fails.

        Raises:
            NoRecommendationError: No recommendation exists.
            ConcurrentModificationError: expected_version is stale.
            AlreadyVerifiedError: The current version is already verified.
        """
        async with self._audit.track(
            actor_id, AuditAction.FDARS_VERIFY, _FDARS, project_id
        ) as scope:
            async with self._store.transaction() as uow:
                current = await uow.fdars_recommendations.get(
                    project_id, for_update=True
                )
                if current is None:
                    raise NoRecommendationError(project_id)
                if expected_version is not None and expected_version != current.version:
                    raise ConcurrentModificationError(
                        _FDARS, project_id, expected_version, current.version
                    )
                verified = current.verified_as(actor_id, self._time.now())
                await uow.fdars_recommendations.save(verified, current.version)
            scope.metadata["version"] = verified.version

        logger.info(
            "fdars_verified",
            project_id=project_id,
            actor_id=actor_id,
            version=verified.version,
        )
        return verified

    async def get_fdars_recommendation(
        self, project_id: str
    ) -> FDARSRecommendation | None:
        async with self._store.transaction() as uow:
            return await uow.fdars_recommendations.get(project_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _transition(
        self,
        balloting_id: UUID,
        new_status: BallotingStatus,
        action: AuditAction,
        actor_id: str,
    ) -> Balloting:
        async with self._audit.track(
            actor_id, action, _BALLOTING, str(balloting_id), to_status=new_status.value
        ):
            async with self._store.transaction() as uow:
                balloting = await self._require(uow, balloting_id, for_update=True)
                moved = balloting.with_status(new_status, self._time.now())
                await uow.ballotings.update(moved)

        logger.info(
            "balloting_status_changed",
            balloting_id=str(balloting_id),
            from_status=balloting.status.value,
            to_status=new_status.value,
            actor_id=actor_id,
        )
        return moved

    async def _require(
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
