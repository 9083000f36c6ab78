"""Service wiring over in-memory stubs for application tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from src.application.services import (
    AcceptanceEvaluatorService,
    AuditTrailRecorder,
    BallotingSessionService,
    NSBResponseChangeService,
    QuorumCheckerService,
    VoteLedgerService,
)
from src.config.governance_config import GovernanceConfig
from src.domain.models.balloting import Balloting
from src.domain.models.governance_policy import AcceptanceCriteria, QuorumPolicy
from src.infrastructure.stubs import (
    AuditTrailEmitterStub,
    InMemoryGovernanceStore,
    MemberEligibilityStub,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority

PROJECT_ID = "PRJ-001"
TC_SECRETARY = "tc-secretary"

# Ten P-members; 7 of 10 is exactly the 0.7 threshold.
MEMBERS = tuple(f"member-{n:02d}" for n in range(1, 11))

DEFAULT_CONFIG = GovernanceConfig(
    acceptance_criteria=AcceptanceCriteria(threshold_fraction=0.7, max_disapprovals=2),
    quorum=QuorumPolicy(required_fraction=0.5),
)


@dataclass
class BallotingHarness:
    """All services sharing one store, clock, emitter and electorate."""

    config: GovernanceConfig = DEFAULT_CONFIG
    store: InMemoryGovernanceStore = field(default_factory=InMemoryGovernanceStore)
    clock: FakeTimeAuthority = field(default_factory=FakeTimeAuthority)
    emitter: AuditTrailEmitterStub = field(default_factory=AuditTrailEmitterStub)
    eligibility: MemberEligibilityStub = field(
        default_factory=lambda: MemberEligibilityStub(default=MEMBERS)
    )
    check_voter_eligibility: bool = False

    def __post_init__(self) -> None:
        self.audit = AuditTrailRecorder(self.emitter, self.clock)
        self.ledger = VoteLedgerService(
            self.store,
            self.clock,
            self.audit,
            eligibility=self.eligibility if self.check_voter_eligibility else None,
        )
        self.sessions = BallotingSessionService(
            self.store, self.clock, self.audit, self.eligibility, self.config
        )
        self.evaluator = AcceptanceEvaluatorService(
            self.store, self.clock, self.audit, self.eligibility, self.config
        )
        self.changes = NSBResponseChangeService(self.store, self.clock, self.audit)
        self.quorum = QuorumCheckerService(
            self.store, self.clock, self.audit, self.eligibility, self.config
        )

    async def open_balloting(
        self, project_id: str = PROJECT_ID, days: int = 7
    ) -> Balloting:
        """Create and open a round whose window starts now."""
        start = self.clock.now()
        balloting = await self.sessions.create(
            project_id, start, start + timedelta(days=days), actor_id=TC_SECRETARY
        )
        return await self.sessions.open(balloting.id, actor_id=TC_SECRETARY)

    async def cast(
        self,
        balloting: Balloting,
        member_id: str,
        choice: str = "APPROVE",
        comment: str = "",
    ):
        return await self.ledger.cast_vote(
            balloting.id,
            balloting.project_id,
            member_id,
            choice,
            comment,
            actor_id=member_id,
        )
