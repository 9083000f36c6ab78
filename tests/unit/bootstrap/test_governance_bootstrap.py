"""Unit tests for governance bootstrap wiring."""

from __future__ import annotations

from datetime import timedelta

import pytest

from src.bootstrap.governance import (
    get_audit_trail_recorder,
    get_balloting_session_service,
    get_governance_config,
    get_governance_store,
    get_member_eligibility,
    get_quorum_checker_service,
    get_time_authority,
    get_vote_ledger_service,
    reset_governance_dependencies,
    set_audit_trail_emitter,
    set_governance_config,
    set_governance_store,
    set_member_eligibility,
    set_time_authority,
)
from src.config.governance_config import GovernanceConfig
from src.domain.errors import IneligibleVoterError
from src.domain.models.governance_policy import QuorumPolicy
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from src.infrastructure.stubs import (
    AuditTrailEmitterStub,
    InMemoryGovernanceStore,
    MemberEligibilityStub,
)
from tests.helpers import FakeTimeAuthority


@pytest.fixture(autouse=True)
def _no_database(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    for var in (
        "ACCEPTANCE_THRESHOLD_FRACTION",
        "ACCEPTANCE_MAX_DISAPPROVALS",
        "QUORUM_REQUIRED_FRACTION",
    ):
        monkeypatch.delenv(var, raising=False)


def test_in_memory_store_without_database_url() -> None:
    store = get_governance_store()

    assert isinstance(store, InMemoryGovernanceStore)
    assert get_governance_store() is store


def test_defaults() -> None:
    assert isinstance(get_time_authority(), SystemTimeAuthority)
    assert isinstance(get_member_eligibility(), MemberEligibilityStub)
    assert get_governance_config() == GovernanceConfig()


def test_config_loaded_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUORUM_REQUIRED_FRACTION", "0.5")

    assert get_governance_config().quorum == QuorumPolicy(0.5)


def test_setters_are_used_by_services() -> None:
    store = InMemoryGovernanceStore()
    eligibility = MemberEligibilityStub(default=["m-1"])
    config = GovernanceConfig(quorum=QuorumPolicy(0.5))
    set_governance_store(store)
    set_member_eligibility(eligibility)
    set_governance_config(config)

    assert get_governance_store() is store
    assert get_member_eligibility() is eligibility
    assert get_governance_config() is config
    assert get_balloting_session_service() is not None
    assert get_vote_ledger_service() is not None
    assert get_quorum_checker_service() is not None


def test_replacing_clock_or_emitter_rebuilds_recorder() -> None:
    first = get_audit_trail_recorder()

    set_time_authority(FakeTimeAuthority())
    second = get_audit_trail_recorder()
    set_audit_trail_emitter(AuditTrailEmitterStub())
    third = get_audit_trail_recorder()

    assert first is not second
    assert second is not third
    assert get_audit_trail_recorder() is third


def test_reset() -> None:
    store = InMemoryGovernanceStore()
    set_governance_store(store)

    reset_governance_dependencies()

    assert get_governance_store() is not store


@pytest.mark.parametrize("ledger_first", [True, False])
@pytest.mark.asyncio
async def test_votes_ungated_without_installed_provider(ledger_first: bool) -> None:
    clock = FakeTimeAuthority()
    set_time_authority(clock)
    if ledger_first:
        ledger = get_vote_ledger_service()
        sessions = get_balloting_session_service()
    else:
        sessions = get_balloting_session_service()
        ledger = get_vote_ledger_service()

    balloting = await sessions.create(
        "PRJ-001", clock.now(), clock.now() + timedelta(days=7), actor_id="tc-sec"
    )
    await sessions.open(balloting.id, actor_id="tc-sec")
    vote = await ledger.cast_vote(
        balloting.id, "PRJ-001", "m-1", "APPROVE", "", actor_id="m-1"
    )

    assert vote.member_id == "m-1"


@pytest.mark.asyncio
async def test_installed_provider_gates_votes() -> None:
    clock = FakeTimeAuthority()
    set_time_authority(clock)
    set_member_eligibility(MemberEligibilityStub(default=["m-1"]))
    sessions = get_balloting_session_service()
    ledger = get_vote_ledger_service()

    balloting = await sessions.create(
        "PRJ-001", clock.now(), clock.now() + timedelta(days=7), actor_id="tc-sec"
    )
    await sessions.open(balloting.id, actor_id="tc-sec")

    with pytest.raises(IneligibleVoterError):
        await ledger.cast_vote(
            balloting.id, "PRJ-001", "m-2", "APPROVE", "", actor_id="m-2"
        )
