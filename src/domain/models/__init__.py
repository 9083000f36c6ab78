"""Domain models for balloting, voting and acceptance.

Models are frozen dataclasses with no infrastructure dependencies. State
changes return new instances.
"""

from src.domain.models.acceptance import (
    Acceptance,
    AcceptanceApprovalRequest,
    AcceptanceCriteriaResult,
    AcceptanceCriteriaSnapshot,
    AcceptanceDecision,
    AcceptanceResults,
    AcceptanceStats,
    NSBResponseRow,
    ResponseTotals,
)
from src.domain.models.audit_trail import AuditAction, AuditOutcome, AuditTrailEntry
from src.domain.models.balloting import (
    END_OF_DAY,
    Balloting,
    BallotingStatus,
)
from src.domain.models.balloting_outcome import BallotingDisposition, BallotingOutcome
from src.domain.models.fdars_recommendation import FDARSRecommendation
from src.domain.models.governance_policy import AcceptanceCriteria, QuorumPolicy
from src.domain.models.meeting import Meeting
from src.domain.models.nsb_response import (
    ChangeRequestStatus,
    NSBResponse,
    NSBResponseChangeRequest,
    NSBResponseType,
)
from src.domain.models.quorum import (
    BallotingQuorumSubject,
    MeetingQuorumSubject,
    QuorumResult,
    QuorumSubject,
)
from src.domain.models.vote import Vote, VoteChoice, VoteTally

__all__: list[str] = [
    "Acceptance",
    "AcceptanceApprovalRequest",
    "AcceptanceCriteria",
    "AcceptanceCriteriaResult",
    "AcceptanceCriteriaSnapshot",
    "AcceptanceDecision",
    "AcceptanceResults",
    "AcceptanceStats",
    "AuditAction",
    "AuditOutcome",
    "AuditTrailEntry",
    "Balloting",
    "BallotingDisposition",
    "BallotingOutcome",
    "BallotingQuorumSubject",
    "BallotingStatus",
    "ChangeRequestStatus",
    "END_OF_DAY",
    "FDARSRecommendation",
    "Meeting",
    "MeetingQuorumSubject",
    "NSBResponse",
    "NSBResponseChangeRequest",
    "NSBResponseRow",
    "NSBResponseType",
    "QuorumPolicy",
    "QuorumResult",
    "QuorumSubject",
    "ResponseTotals",
    "Vote",
    "VoteChoice",
    "VoteTally",
]
