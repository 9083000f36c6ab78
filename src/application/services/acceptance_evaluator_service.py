"""Acceptance evaluator service - NSB responses and acceptance decisions.

National Standards Bodies respond once per project. Their responses feed
versioned acceptance snapshots: ``calculate_stats`` captures the counts,
``set_acceptance_approval`` lets a TC secretary decide a snapshot against
explicit acceptance criteria. Decided snapshots are never rewritten; a
later refresh or decision supersedes them with a new version.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from src.domain.errors import (
    AcceptanceNotFoundError,
    ConcurrentModificationError,
    MissingApproverError,
    ThresholdNotConfiguredError,
)
from src.domain.models.acceptance import (
    Acceptance,
    AcceptanceApprovalRequest,
    AcceptanceCriteriaResult,
    AcceptanceCriteriaSnapshot,
    AcceptanceResults,
    AcceptanceStats,
    NSBResponseRow,
    ResponseTotals,
)
from src.domain.models.audit_trail import AuditAction
from src.domain.models.nsb_response import NSBResponse, NSBResponseType
from src.domain.services.acceptance_policy import evaluate_acceptance

if TYPE_CHECKING:
    from src.application.ports.governance_store import GovernanceStoreProtocol
    from src.application.ports.member_eligibility import MemberEligibilityProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.audit_trail_recorder import AuditTrailRecorder
    from src.config.governance_config import GovernanceConfig
    from src.domain.models.governance_policy import AcceptanceCriteria

logger = get_logger(__name__)

_ACCEPTANCE = "acceptance"
_NSB_RESPONSE = "nsb_response"


def _snapshot_from_counts(
    counts: dict[NSBResponseType, int], total_eligible: int
) -> AcceptanceCriteriaSnapshot:
    approvals = sum(n for t, n in counts.items() if t.is_approval)
    disapprovals = counts.get(NSBResponseType.DISAPPROVE, 0)
    return AcceptanceCriteriaSnapshot(
        approvals=approvals,
        disapprovals=disapprovals,
        total_responses=sum(counts.values()),
        total_eligible=total_eligible,
    )


def _zero_filled(counts: dict[NSBResponseType, int]) -> dict[NSBResponseType, int]:
    return {t: counts.get(t, 0) for t in NSBResponseType}


class AcceptanceEvaluatorService:
    """Records NSB responses and evaluates project acceptance.

    Example:
        >>> evaluator = AcceptanceEvaluatorService(store, time_authority, audit, eligibility, config)
        >>> await evaluator.record_nsb_response(
        ...     "PRJ-001", "nsb-ke", "APPROVE_NO_COMMENT", "", actor_id="nsb-ke"
        ... )
        >>> stats = await evaluator.calculate_stats("PRJ-001", actor_id="tc-sec")
        >>> decided = await evaluator.set_acceptance_approval(
        ...     AcceptanceApprovalRequest(stats.acceptance.id, "tc-sec", criteria),
        ...     actor_id="tc-sec",
        ... )
    """

    def __init__(
        self,
        store: GovernanceStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        audit: AuditTrailRecorder,
        eligibility: MemberEligibilityProtocol,
        config: GovernanceConfig,
    ) -> None:
        """Initialize the evaluator.

        Args:
            store: Transactional governance store.
            time_authority: Clock for all timestamps.
            audit: Audit trail recorder.
            eligibility: Source of the eligible respondents per project.
            config: Fallback acceptance criteria when a request has none.
        """
        self._store = store
        self._time = time_authority
        self._audit = audit
        self._eligibility = eligibility
        self._config = config

    async def record_nsb_response(
        self,
        project_id: str,
        responder_id: str,
        response_type: NSBResponseType | str,
        comments: str,
        actor_id: str,
        is_committed_to_participate: bool = False,
    ) -> NSBResponse:
        """Record an NSB's response on a project.

        Raises:
            InvalidResponseTypeError: The response type is not recognised.
            DuplicateResponseError: The responder already responded.
        """
        async with self._audit.track(
            actor_id,
            AuditAction.NSB_RESPONSE_SUBMIT,
            _NSB_RESPONSE,
            project_id=project_id,
            responder_id=responder_id,
        ) as scope:
            parsed = NSBResponseType.parse(response_type)
            response = NSBResponse.submit(
                project_id=project_id,
                responder_id=responder_id,
                response_type=parsed,
                comments=comments,
                submitted_at=self._time.now(),
                is_committed_to_participate=is_committed_to_participate,
            )
            async with self._store.transaction() as uow:
                await uow.nsb_responses.add(response)
            scope.resource_id = str(response.id)
            scope.metadata["response_type"] = parsed.value

        logger.info(
            "nsb_response_recorded",
            response_id=str(response.id),
            project_id=project_id,
            responder_id=responder_id,
            response_type=parsed.value,
        )
        return response

    async def get_responses(self, project_id: str) -> list[NSBResponse]:
        """Responses on a project, newest first."""
        async with self._store.transaction() as uow:
            return await uow.nsb_responses.list_by_project(project_id)

    async def count_responses_by_type(
        self, project_id: str
    ) -> dict[NSBResponseType, int]:
        """Response counts keyed by every response type, zero when absent."""
        async with self._store.transaction() as uow:
            counts = await uow.nsb_responses.count_by_type(project_id)
        return _zero_filled(counts)

    async def calculate_stats(self, project_id: str, actor_id: str) -> AcceptanceStats:
        """Capture current response counts in the project's acceptance snapshot.

        A PENDING latest snapshot is refreshed in place; a decided one is
        superseded by a new PENDING version. No decision is made here.

        Args:
            project_id: Project to evaluate.
            actor_id: Who triggered the calculation.

        Returns:
            AcceptanceStats with the stored snapshot.
        """
        async with self._audit.track(
            actor_id, AuditAction.ACCEPTANCE_STATS, _ACCEPTANCE, project_id=project_id
        ) as scope:
            eligible = await self._eligibility.eligible_member_ids(project_id)
            async with self._store.transaction() as uow:
                counts = await uow.nsb_responses.count_by_type(project_id)
                snapshot = _snapshot_from_counts(counts, len(eligible))
                now = self._time.now()

                latest = await uow.acceptances.get_latest(project_id, for_update=True)
                if latest is None:
                    acceptance = Acceptance.first(project_id, snapshot, now)
                    await uow.acceptances.add(acceptance)
                else:
                    acceptance = latest.refreshed(snapshot, now)
                    if acceptance.id == latest.id:
                        await uow.acceptances.update(acceptance)
                    else:
                        await uow.acceptances.add(acceptance)

            scope.resource_id = str(acceptance.id)
            scope.metadata["version"] = acceptance.version

        logger.info(
            "acceptance_stats_calculated",
            project_id=project_id,
            acceptance_id=str(acceptance.id),
            version=acceptance.version,
            approvals=snapshot.approvals,
            disapprovals=snapshot.disapprovals,
            total_responses=snapshot.total_responses,
        )
        return AcceptanceStats(
            project_id=project_id,
            total_responses=snapshot.total_responses,
            approvals=snapshot.approvals,
            disapprovals=snapshot.disapprovals,
            approval_rate=snapshot.approval_rate,
            acceptance=acceptance,
        )

    async def set_acceptance_approval(
        self, request: AcceptanceApprovalRequest, actor_id: str
    ) -> Acceptance:
        """Decide an acceptance snapshot against acceptance criteria.

        The decision is the policy evaluation of the snapshot's counts. A
        PENDING snapshot is decided in place; a decided one is superseded by
        a new version carrying the new decision.

        Args:
            request: Snapshot id, approver and criteria.
            actor_id: Who performs the call.

        Returns:
            The decided Acceptance (same or new version).

        Raises:
            MissingApproverError: request.tc_secretary_id is unset.
            ThresholdNotConfiguredError: Neither the request nor the
                configuration supplies criteria.
            AcceptanceNotFoundError: No such snapshot.
            ConcurrentModificationError: The snapshot was superseded.
            NoEligibleMembersError: The snapshot has zero eligible respondents.
        """
        log = logger.bind(
            acceptance_id=str(request.acceptance_id),
            tc_secretary_id=request.tc_secretary_id,
            actor_id=actor_id,
        )

        async with self._audit.track(
            actor_id,
            AuditAction.ACCEPTANCE_DECISION,
            _ACCEPTANCE,
            str(request.acceptance_id),
        ) as scope:
            tc_secretary_id = (request.tc_secretary_id or "").strip()
            if not tc_secretary_id:
                raise MissingApproverError(request.acceptance_id)
            criteria = self._resolve_criteria(request.criteria)

            async with self._store.transaction() as uow:
                acceptance = await uow.acceptances.get(
                    request.acceptance_id, for_update=True
                )
                if acceptance is None:
                    raise AcceptanceNotFoundError(request.acceptance_id)

                latest = await uow.acceptances.get_latest(
                    acceptance.project_id, for_update=True
                )
                if latest is not None and latest.id != acceptance.id:
                    raise ConcurrentModificationError(
                        _ACCEPTANCE,
                        acceptance.project_id,
                        acceptance.version,
                        latest.version,
                    )

                result = evaluate_acceptance(
                    approvals=acceptance.snapshot.approvals,
                    disapprovals=acceptance.snapshot.disapprovals,
                    total_eligible=acceptance.snapshot.total_eligible,
                    criteria=criteria,
                    subject=f"project {acceptance.project_id}",
                )
                decided = acceptance.decided(
                    result.decision, tc_secretary_id, self._time.now()
                )
                if decided.id == acceptance.id:
                    await uow.acceptances.update(decided)
                else:
                    await uow.acceptances.add(decided)

            scope.resource_id = str(decided.id)
            scope.metadata.update(
                decision=decided.decision.value, version=decided.version
            )

        log.info(
            "acceptance_decided",
            decision=decided.decision.value,
            version=decided.version,
            message=result.message,
        )
        return decided

    async def evaluate_criteria(
        self, project_id: str, criteria: AcceptanceCriteria | None = None
    ) -> AcceptanceCriteriaResult:
        """Evaluate acceptance criteria against current responses without persisting.

        Raises:
            ThresholdNotConfiguredError: No criteria supplied or configured.
            NoEligibleMembersError: Nobody is eligible on the project.
        """
        resolved = self._resolve_criteria(criteria)
        eligible = await self._eligibility.eligible_member_ids(project_id)
        async with self._store.transaction() as uow:
            counts = await uow.nsb_responses.count_by_type(project_id)
        snapshot = _snapshot_from_counts(counts, len(eligible))
        return evaluate_acceptance(
            approvals=snapshot.approvals,
            disapprovals=snapshot.disapprovals,
            total_eligible=snapshot.total_eligible,
            criteria=resolved,
            subject=f"project {project_id}",
        )

    async def get_acceptance_results(self, project_id: str) -> AcceptanceResults:
        """Per-NSB breakdown of a project's responses with totals."""
        async with self._store.transaction() as uow:
            responses = await uow.nsb_responses.list_by_project(project_id)
            latest = await uow.acceptances.get_latest(project_id)

        rows = tuple(
            NSBResponseRow(
                response_id=r.id,
                responder_id=r.responder_id,
                response_type=r.response_type,
                approved=r.response_type.is_approval,
                disapproved=r.response_type == NSBResponseType.DISAPPROVE,
                comments_enclosed=r.has_comments,
                participation=r.is_committed_to_participate,
            )
            for r in responses
        )
        totals = ResponseTotals(
            total_responses=len(rows),
            approval_count=sum(1 for row in rows if row.approved),
            approve_no_comment_count=sum(
                1 for row in rows
                if row.response_type == NSBResponseType.APPROVE_NO_COMMENT
            ),
            approve_with_comment_count=sum(
                1 for row in rows
                if row.response_type == NSBResponseType.APPROVE_WITH_COMMENT
            ),
            disapproval_count=sum(1 for row in rows if row.disapproved),
            comments_count=sum(1 for row in rows if row.comments_enclosed),
            participation_count=sum(1 for row in rows if row.participation),
        )
        return AcceptanceResults(
            project_id=project_id,
            acceptance_id=latest.id if latest is not None else None,
            rows=rows,
            totals=totals,
        )

    async def get_latest_acceptance(self, project_id: str) -> Acceptance | None:
        async with self._store.transaction() as uow:
            return await uow.acceptances.get_latest(project_id)

    async def get_acceptance_history(self, project_id: str) -> list[Acceptance]:
        """All snapshot versions of a project, oldest first."""
        async with self._store.transaction() as uow:
            return await uow.acceptances.list_by_project(project_id)

    async def get_acceptance(self, acceptance_id: UUID) -> Acceptance:
        """Raises AcceptanceNotFoundError if the snapshot does not exist."""
        async with self._store.transaction() as uow:
            acceptance = await uow.acceptances.get(acceptance_id)
        if acceptance is None:
            raise AcceptanceNotFoundError(acceptance_id)
        return acceptance

    def _resolve_criteria(
        self, criteria: AcceptanceCriteria | None
    ) -> AcceptanceCriteria:
        if criteria is not None:
            return criteria
        if self._config.acceptance_criteria is None:
            raise ThresholdNotConfiguredError("acceptance_criteria")
        return self._config.acceptance_criteria
