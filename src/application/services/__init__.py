"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with infrastructure adapters.

Available services:
- VoteLedgerService: Casting, revising and tallying votes
- BallotingSessionService: Balloting lifecycle, outcomes and FDARS
- AcceptanceEvaluatorService: NSB responses and acceptance decisions
- NSBResponseChangeService: Change requests on recorded NSB responses
- QuorumCheckerService: Quorum for meetings and balloting rounds
- AuditTrailRecorder: Fire-and-forget audit entries per operation
"""

from src.application.services.acceptance_evaluator_service import (
    AcceptanceEvaluatorService,
)
from src.application.services.audit_trail_recorder import (
    AuditScope,
    AuditTrailRecorder,
)
from src.application.services.balloting_session_service import (
    BallotingSessionService,
)
from src.application.services.nsb_response_change_service import (
    NSBResponseChangeService,
)
from src.application.services.quorum_checker_service import QuorumCheckerService
from src.application.services.vote_ledger_service import VoteLedgerService

__all__: list[str] = [
    "AcceptanceEvaluatorService",
    "AuditScope",
    "AuditTrailRecorder",
    "BallotingSessionService",
    "NSBResponseChangeService",
    "QuorumCheckerService",
    "VoteLedgerService",
]
