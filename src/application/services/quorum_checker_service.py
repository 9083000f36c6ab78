"""Quorum checker service.

Quorum holds when the distinct eligible participants reach
``ceil(required_fraction x eligible)``. Subjects are a closed set of
variants: meetings (participants are eligible attendees) and ballotings
(participants are eligible distinct voters). A meeting check also records
its result on the meeting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from src.domain.errors import (
    BallotingNotFoundError,
    MeetingNotFoundError,
    ThresholdNotConfiguredError,
)
from src.domain.models.audit_trail import AuditAction
from src.domain.models.governance_policy import QuorumPolicy
from src.domain.models.meeting import Meeting
from src.domain.models.quorum import (
    BallotingQuorumSubject,
    MeetingQuorumSubject,
    QuorumResult,
    QuorumSubject,
)
from src.domain.services.quorum_policy import evaluate_quorum

if TYPE_CHECKING:
    from collections.abc import Iterable

    from src.application.ports.governance_store import GovernanceStoreProtocol
    from src.application.ports.member_eligibility import MemberEligibilityProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.audit_trail_recorder import AuditTrailRecorder
    from src.config.governance_config import GovernanceConfig

logger = get_logger(__name__)

_MEETING = "meeting"
# Actor recorded for meeting quorum checks triggered without a caller.
_SYSTEM_ACTOR = "system"


class QuorumCheckerService:
    """Evaluates quorum for meetings and balloting rounds.

    Example:
        >>> checker = QuorumCheckerService(store, time_authority, audit, eligibility, config)
        >>> await checker.check_quorum(MeetingQuorumSubject(meeting.id), required_fraction=0.5)
        True
    """

    def __init__(
        self,
        store: GovernanceStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        audit: AuditTrailRecorder,
        eligibility: MemberEligibilityProtocol,
        config: GovernanceConfig,
    ) -> None:
        """Initialize the quorum checker.

        Args:
            store: Transactional governance store.
            time_authority: Clock for quorum-check timestamps.
            audit: Audit trail recorder.
            eligibility: Electorate for balloting subjects.
            config: Default quorum policy.
        """
        self._store = store
        self._time = time_authority
        self._audit = audit
        self._eligibility = eligibility
        self._config = config

    async def check_quorum(
        self,
        subject: QuorumSubject,
        required_fraction: float | None = None,
        *,
        actor_id: str = _SYSTEM_ACTOR,
    ) -> bool:
        """Check whether a subject has quorum.

        Args:
            subject: Meeting or balloting to check.
            required_fraction: Overrides the configured fraction.
            actor_id: Recorded on the audit entry of a meeting check.

        Returns:
            True if quorum is met.

        Raises:
            InvalidThresholdError: required_fraction is outside (0, 1].
            ThresholdNotConfiguredError: No fraction given or configured.
            NoEligibleMembersError: The subject has no eligible members.
            MeetingNotFoundError: Unknown meeting.
            BallotingNotFoundError: Unknown balloting.
        """
        result = await self.evaluate_quorum(
            subject, required_fraction, actor_id=actor_id
        )
        return result.met

    async def evaluate_quorum(
        self,
        subject: QuorumSubject,
        required_fraction: float | None = None,
        *,
        actor_id: str = _SYSTEM_ACTOR,
    ) -> QuorumResult:
        """Evaluate quorum and return the full breakdown.

        See check_quorum for errors.
        """
        policy = self._resolve_policy(required_fraction)

        if isinstance(subject, MeetingQuorumSubject):
            result = await self._evaluate_meeting(subject, policy, actor_id)
        elif isinstance(subject, BallotingQuorumSubject):
            result = await self._evaluate_balloting(subject, policy)
        else:
            raise TypeError(f"Unsupported quorum subject: {type(subject).__name__}")

        logger.info(
            "quorum_evaluated",
            subject=subject.label,
            participating=result.participating,
            eligible=result.eligible,
            required=result.required,
            met=result.met,
        )
        return result

    async def register_meeting(
        self,
        committee_id: str,
        eligible_member_ids: Iterable[str],
        actor_id: str,
        project_id: str | None = None,
    ) -> Meeting:
        """Register a meeting whose attendance will be tracked for quorum."""
        meeting = Meeting(
            id=uuid4(),
            committee_id=committee_id,
            eligible_member_ids=frozenset(eligible_member_ids),
            project_id=project_id,
        )
        async with self._audit.track(
            actor_id,
            AuditAction.MEETING_ATTENDANCE,
            _MEETING,
            str(meeting.id),
            committee_id=committee_id,
            change="register",
        ):
            async with self._store.transaction() as uow:
                await uow.meetings.add(meeting)

        logger.info(
            "meeting_registered",
            meeting_id=str(meeting.id),
            committee_id=committee_id,
            eligible=len(meeting.eligible_member_ids),
        )
        return meeting

    async def record_attendance(
        self, meeting_id: UUID, member_id: str, actor_id: str
    ) -> Meeting:
        """Mark a member as attending. Idempotent.

        Raises:
            MeetingNotFoundError: Unknown meeting.
        """
        return await self._change_attendance(
            meeting_id, member_id, actor_id, attending=True
        )

    async def withdraw_attendance(
        self, meeting_id: UUID, member_id: str, actor_id: str
    ) -> Meeting:
        """Remove a member from the attendees. Idempotent.

        Raises:
            MeetingNotFoundError: Unknown meeting.
        """
        return await self._change_attendance(
            meeting_id, member_id, actor_id, attending=False
        )

    async def _change_attendance(
        self, meeting_id: UUID, member_id: str, actor_id: str, *, attending: bool
    ) -> Meeting:
        async with self._audit.track(
            actor_id,
            AuditAction.MEETING_ATTENDANCE,
            _MEETING,
            str(meeting_id),
            member_id=member_id,
            change="attend" if attending else "withdraw",
        ):
            async with self._store.transaction() as uow:
                meeting = await uow.meetings.get(meeting_id, for_update=True)
                if meeting is None:
                    raise MeetingNotFoundError(meeting_id)
                if attending:
                    changed = meeting.with_attendee(member_id)
                else:
                    changed = meeting.without_attendee(member_id)
                await uow.meetings.update(changed)

        logger.info(
            "meeting_attendance_changed",
            meeting_id=str(meeting_id),
            member_id=member_id,
            attending=attending,
        )
        return changed

    async def _evaluate_meeting(
        self, subject: MeetingQuorumSubject, policy: QuorumPolicy, actor_id: str
    ) -> QuorumResult:
        async with self._audit.track(
            actor_id,
            AuditAction.MEETING_QUORUM_CHECK,
            _MEETING,
            str(subject.meeting_id),
            required_fraction=policy.required_fraction,
        ) as scope:
            async with self._store.transaction() as uow:
                meeting = await uow.meetings.get(subject.meeting_id, for_update=True)
                if meeting is None:
                    raise MeetingNotFoundError(subject.meeting_id)
                result = evaluate_quorum(
                    len(meeting.participating_member_ids),
                    len(meeting.eligible_member_ids),
                    policy,
                    subject.label,
                )
                await uow.meetings.update(
                    meeting.with_quorum_result(result.met, self._time.now())
                )
            scope.metadata["met"] = result.met
        return result

    async def _evaluate_balloting(
        self, subject: BallotingQuorumSubject, policy: QuorumPolicy
    ) -> QuorumResult:
        async with self._store.transaction() as uow:
            balloting = await uow.ballotings.get(subject.balloting_id)
            if balloting is None:
                raise BallotingNotFoundError(subject.balloting_id)
            votes = await uow.votes.list_by_balloting(subject.balloting_id)

        eligible = await self._eligibility.eligible_member_ids(balloting.project_id)
        voters = {vote.member_id for vote in votes} & eligible
        return evaluate_quorum(len(voters), len(eligible), policy, subject.label)

    def _resolve_policy(self, required_fraction: float | None) -> QuorumPolicy:
        if required_fraction is not None:
            return QuorumPolicy(required_fraction)
        if self._config.quorum is None:
            raise ThresholdNotConfiguredError("quorum_required_fraction")
        return self._config.quorum
