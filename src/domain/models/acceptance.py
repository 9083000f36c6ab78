"""Acceptance domain models: versioned snapshots of NSB response statistics.

An Acceptance records the counts behind an acceptance decision. A PENDING
snapshot may have its counts refreshed and may be decided once. After a
decision the snapshot is part of the audit trail: later refreshes or
decisions produce a new snapshot with an incremented version that points
at the one it supersedes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from src.domain.models.governance_policy import AcceptanceCriteria
from src.domain.models.nsb_response import NSBResponseType


class AcceptanceDecision(Enum):
    """Decision recorded on an acceptance snapshot."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True, eq=True)
class AcceptanceCriteriaSnapshot:
    """Counts captured when acceptance statistics were calculated.

    Attributes:
        approvals: Responses of either APPROVE type.
        disapprovals: DISAPPROVE responses.
        total_responses: All responses recorded for the project.
        total_eligible: Members eligible to respond.
    """

    approvals: int = 0
    disapprovals: int = 0
    total_responses: int = 0
    total_eligible: int = 0

    def __post_init__(self) -> None:
        """Validate count consistency."""
        for name in ("approvals", "disapprovals", "total_responses", "total_eligible"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.approvals + self.disapprovals > self.total_responses:
            raise ValueError(
                f"approvals ({self.approvals}) + disapprovals ({self.disapprovals}) "
                f"exceed total_responses ({self.total_responses})"
            )

    @property
    def approval_rate(self) -> float:
        """Approvals over total responses; 0.0 when nothing was recorded."""
        if self.total_responses == 0:
            return 0.0
        return self.approvals / self.total_responses


@dataclass(frozen=True, eq=True)
class Acceptance:
    """A versioned acceptance snapshot for a project.

    Attributes:
        id: Unique identifier of this version.
        project_id: The project evaluated.
        version: 1 for the first snapshot, incremented on supersession.
        snapshot: Counts the decision is based on.
        created_at: When this version was created.
        decision: PENDING until SetAcceptanceApproval decides it.
        tc_secretary_id: Approver who decided it.
        decided_at: Decision timestamp.
        supersedes_id: Previous version, if any.
        updated_at: Last count refresh while PENDING.
    """

    id: UUID
    project_id: str
    version: int
    snapshot: AcceptanceCriteriaSnapshot
    created_at: datetime
    decision: AcceptanceDecision = field(default=AcceptanceDecision.PENDING)
    tc_secretary_id: str | None = field(default=None)
    decided_at: datetime | None = field(default=None)
    supersedes_id: UUID | None = field(default=None)
    updated_at: datetime | None = field(default=None)

    @classmethod
    def first(
        cls, project_id: str, snapshot: AcceptanceCriteriaSnapshot, at: datetime
    ) -> Acceptance:
        return cls(
            id=uuid4(),
            project_id=project_id,
            version=1,
            snapshot=snapshot,
            created_at=at,
        )

    @property
    def is_decided(self) -> bool:
        return self.decision != AcceptanceDecision.PENDING

    def superseded(
        self,
        snapshot: AcceptanceCriteriaSnapshot,
        at: datetime,
        decision: AcceptanceDecision = AcceptanceDecision.PENDING,
        tc_secretary_id: str | None = None,
    ) -> Acceptance:
        """Create the next version, leaving this one untouched."""
        return Acceptance(
            id=uuid4(),
            project_id=self.project_id,
            version=self.version + 1,
            snapshot=snapshot,
            created_at=at,
            decision=decision,
            tc_secretary_id=tc_secretary_id,
            decided_at=at if decision != AcceptanceDecision.PENDING else None,
            supersedes_id=self.id,
        )

    def refreshed(self, snapshot: AcceptanceCriteriaSnapshot, at: datetime) -> Acceptance:
        """Apply fresh counts: in place while PENDING, as a new version once decided."""
        if self.is_decided:
            return self.superseded(snapshot, at)
        return replace(self, snapshot=snapshot, updated_at=at)

    def decided(
        self, decision: AcceptanceDecision, tc_secretary_id: str, at: datetime
    ) -> Acceptance:
        """Record a decision: in place while PENDING, as a new version once decided."""
        if self.is_decided:
            return self.superseded(
                self.snapshot, at, decision=decision, tc_secretary_id=tc_secretary_id
            )
        return replace(
            self,
            decision=decision,
            tc_secretary_id=tc_secretary_id,
            decided_at=at,
            updated_at=at,
        )


@dataclass(frozen=True)
class AcceptanceCriteriaResult:
    """Outcome of evaluating acceptance criteria against a set of counts.

    Attributes:
        criteria_met: True when both threshold and disapproval cap hold.
        acceptance_rate: Approvals over total eligible.
        required_rate: Configured threshold fraction.
        approvals: Approval count evaluated.
        disapprovals: Disapproval count evaluated.
        total_eligible: Eligible respondents.
        max_disapprovals: Configured disapproval cap.
        message: Human-readable summary.
    """

    criteria_met: bool
    acceptance_rate: float
    required_rate: float
    approvals: int
    disapprovals: int
    total_eligible: int
    max_disapprovals: int
    message: str

    @property
    def decision(self) -> AcceptanceDecision:
        return AcceptanceDecision.ACCEPTED if self.criteria_met else AcceptanceDecision.REJECTED


@dataclass(frozen=True)
class AcceptanceStats:
    """Result of CalculateStats for a project."""

    project_id: str
    total_responses: int
    approvals: int
    disapprovals: int
    approval_rate: float
    acceptance: Acceptance


@dataclass(frozen=True)
class NSBResponseRow:
    """One row of the per-NSB acceptance results table."""

    response_id: UUID
    responder_id: str
    response_type: NSBResponseType
    approved: bool
    disapproved: bool
    comments_enclosed: bool
    participation: bool


@dataclass(frozen=True)
class ResponseTotals:
    """Totals row of the acceptance results table."""

    total_responses: int = 0
    approval_count: int = 0
    approve_no_comment_count: int = 0
    approve_with_comment_count: int = 0
    disapproval_count: int = 0
    comments_count: int = 0
    participation_count: int = 0


@dataclass(frozen=True)
class AcceptanceResults:
    """Per-NSB breakdown of the responses on a project."""

    project_id: str
    acceptance_id: UUID | None
    rows: tuple[NSBResponseRow, ...]
    totals: ResponseTotals


@dataclass(frozen=True)
class AcceptanceApprovalRequest:
    """Request to decide an acceptance snapshot.

    Attributes:
        acceptance_id: Snapshot to decide.
        tc_secretary_id: Approver; required.
        criteria: Threshold and disapproval cap to evaluate against. When
            None the service falls back to configured criteria.
    """

    acceptance_id: UUID
    tc_secretary_id: str | None
    criteria: AcceptanceCriteria | None = None
