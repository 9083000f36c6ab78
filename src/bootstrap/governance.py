"""Bootstrap wiring for the balloting core services.

The governance store is PostgreSQL when DATABASE_URL is set and the
in-memory stub otherwise. Member eligibility and audit emission belong to
the surrounding platform: install them with ``set_member_eligibility`` and
``set_audit_trail_emitter`` before the first service is requested.
"""

from __future__ import annotations

import os

from structlog import get_logger

from src.application.ports.audit_trail_emitter import AuditTrailEmitterProtocol
from src.application.ports.governance_store import GovernanceStoreProtocol
from src.application.ports.member_eligibility import MemberEligibilityProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.acceptance_evaluator_service import (
    AcceptanceEvaluatorService,
)
from src.application.services.audit_trail_recorder import AuditTrailRecorder
from src.application.services.balloting_session_service import (
    BallotingSessionService,
)
from src.application.services.nsb_response_change_service import (
    NSBResponseChangeService,
)
from src.application.services.quorum_checker_service import QuorumCheckerService
from src.application.services.vote_ledger_service import VoteLedgerService
from src.bootstrap.database import get_session_factory
from src.config.governance_config import GovernanceConfig
from src.infrastructure.adapters.persistence import PostgresGovernanceStore
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from src.infrastructure.stubs.governance_store_stub import InMemoryGovernanceStore
from src.infrastructure.stubs.member_eligibility_stub import MemberEligibilityStub

logger = get_logger(__name__)

_store: GovernanceStoreProtocol | None = None
_time_authority: TimeAuthorityProtocol | None = None
_audit_emitter: AuditTrailEmitterProtocol | None = None
_eligibility: MemberEligibilityProtocol | None = None
_empty_eligibility: MemberEligibilityStub | None = None
_config: GovernanceConfig | None = None
_audit_recorder: AuditTrailRecorder | None = None


def get_governance_store() -> GovernanceStoreProtocol:
    """Get the governance store (PostgreSQL if DATABASE_URL is set)."""
    global _store
    if _store is None:
        if os.environ.get("DATABASE_URL"):
            _store = PostgresGovernanceStore(get_session_factory())
            logger.info("governance_store_selected", store="postgres")
        else:
            _store = InMemoryGovernanceStore()
            logger.warning("governance_store_selected", store="in_memory")
    return _store


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_member_eligibility() -> MemberEligibilityProtocol:
    """Get the eligibility provider; an empty stub until one is installed.

    The empty stub is never recorded as the installed provider, so vote
    gating only depends on ``set_member_eligibility``.
    """
    global _empty_eligibility
    if _eligibility is not None:
        return _eligibility
    if _empty_eligibility is None:
        logger.warning("member_eligibility_not_configured")
        _empty_eligibility = MemberEligibilityStub()
    return _empty_eligibility


def get_governance_config() -> GovernanceConfig:
    """Get thresholds, loaded from the environment on first use."""
    global _config
    if _config is None:
        _config = GovernanceConfig.from_environment()
    return _config


def get_audit_trail_recorder() -> AuditTrailRecorder:
    global _audit_recorder
    if _audit_recorder is None:
        _audit_recorder = AuditTrailRecorder(_audit_emitter, get_time_authority())
    return _audit_recorder


def get_vote_ledger_service() -> VoteLedgerService:
    return VoteLedgerService(
        store=get_governance_store(),
        time_authority=get_time_authority(),
        audit=get_audit_trail_recorder(),
        eligibility=_eligibility,
    )


def get_balloting_session_service() -> BallotingSessionService:
    return BallotingSessionService(
        store=get_governance_store(),
        time_authority=get_time_authority(),
        audit=get_audit_trail_recorder(),
        eligibility=get_member_eligibility(),
        config=get_governance_config(),
    )


def get_acceptance_evaluator_service() -> AcceptanceEvaluatorService:
    return AcceptanceEvaluatorService(
        store=get_governance_store(),
        time_authority=get_time_authority(),
        audit=get_audit_trail_recorder(),
        eligibility=get_member_eligibility(),
        config=get_governance_config(),
    )


def get_nsb_response_change_service() -> NSBResponseChangeService:
    return NSBResponseChangeService(
        store=get_governance_store(),
        time_authority=get_time_authority(),
        audit=get_audit_trail_recorder(),
    )


def get_quorum_checker_service() -> QuorumCheckerService:
    return QuorumCheckerService(
        store=get_governance_store(),
        time_authority=get_time_authority(),
        audit=get_audit_trail_recorder(),
        eligibility=get_member_eligibility(),
        config=get_governance_config(),
    )


def set_governance_store(store: GovernanceStoreProtocol) -> None:
    """Set a custom governance store (tests, alternative backends)."""
    global _store
    _store = store


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    global _time_authority, _audit_recorder
    _time_authority = time_authority
    _audit_recorder = None


def set_audit_trail_emitter(emitter: AuditTrailEmitterProtocol | None) -> None:
    global _audit_emitter, _audit_recorder
    _audit_emitter = emitter
    _audit_recorder = None


def set_member_eligibility(eligibility: MemberEligibilityProtocol) -> None:
    global _eligibility
    _eligibility = eligibility


def set_governance_config(config: GovernanceConfig) -> None:
    global _config
    _config = config


def reset_governance_dependencies() -> None:
    """Reset all singleton instances for testing."""
    global _store, _time_authority, _audit_emitter, _eligibility, _config
    global _audit_recorder, _empty_eligibility

    _store = None
    _time_authority = None
    _audit_emitter = None
    _eligibility = None
    _empty_eligibility = None
    _config = None
    _audit_recorder = None
