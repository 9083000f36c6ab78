"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- GovernanceStoreProtocol: Transactional unit of work over all repositories
- Balloting/Vote/NSBResponse/Acceptance/FDARS/Meeting repository protocols
- AuditTrailEmitterProtocol: Fire-and-forget audit entries
- MemberEligibilityProtocol: Eligible electorate per project
- TimeAuthorityProtocol: Injected clock
"""

from src.application.ports.acceptance_repository import AcceptanceRepositoryProtocol
from src.application.ports.audit_trail_emitter import AuditTrailEmitterProtocol
from src.application.ports.balloting_repository import BallotingRepositoryProtocol
from src.application.ports.fdars_recommendation_repository import (
    FDARSRecommendationRepositoryProtocol,
)
from src.application.ports.governance_store import (
    GovernanceStoreProtocol,
    GovernanceUnitOfWorkProtocol,
)
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.member_eligibility import MemberEligibilityProtocol
from src.application.ports.nsb_response_repository import (
    NSBResponseChangeRequestRepositoryProtocol,
    NSBResponseRepositoryProtocol,
)
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.ports.vote_repository import VoteRepositoryProtocol

__all__: list[str] = [
    "AcceptanceRepositoryProtocol",
    "AuditTrailEmitterProtocol",
    "BallotingRepositoryProtocol",
    "FDARSRecommendationRepositoryProtocol",
    "GovernanceStoreProtocol",
    "GovernanceUnitOfWorkProtocol",
    "MeetingRepositoryProtocol",
    "MemberEligibilityProtocol",
    "NSBResponseChangeRequestRepositoryProtocol",
    "NSBResponseRepositoryProtocol",
    "TimeAuthorityProtocol",
    "VoteRepositoryProtocol",
]
