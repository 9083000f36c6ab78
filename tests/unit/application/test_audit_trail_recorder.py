"""Unit tests for AuditTrailRecorder."""

import pytest

from src.application.services.audit_trail_recorder import AuditTrailRecorder
from src.domain.errors import BallotingNotFoundError
from src.domain.models.audit_trail import AuditAction, AuditOutcome
from src.infrastructure.stubs import AuditTrailEmitterStub
from tests.helpers import FakeTimeAuthority


@pytest.fixture
def emitter() -> AuditTrailEmitterStub:
    return AuditTrailEmitterStub()


@pytest.fixture
def recorder(
    emitter: AuditTrailEmitterStub, fake_time_authority: FakeTimeAuthority
) -> AuditTrailRecorder:
    return AuditTrailRecorder(emitter, fake_time_authority)


class TestTrack:
    @pytest.mark.asyncio
    async def test_success_entry(
        self,
        recorder: AuditTrailRecorder,
        emitter: AuditTrailEmitterStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        async with recorder.track(
            "tc-sec", AuditAction.BALLOT_CREATE, "balloting", project_id="PRJ-001"
        ) as scope:
            scope.resource_id = "b-1"
            scope.metadata["extra"] = 1

        [entry] = emitter.entries
        assert entry.outcome == AuditOutcome.SUCCESS
        assert entry.resource_id == "b-1"
        assert entry.metadata == {"project_id": "PRJ-001", "extra": 1}
        assert entry.timestamp == fake_time_authority.now()

    @pytest.mark.asyncio
    async def test_failure_entry_and_reraise(
        self, recorder: AuditTrailRecorder, emitter: AuditTrailEmitterStub
    ) -> None:
        with pytest.raises(BallotingNotFoundError):
            async with recorder.track(
                "tc-sec", AuditAction.BALLOT_OPEN, "balloting", "b-404"
            ):
                raise BallotingNotFoundError("b-404")

        [entry] = emitter.entries
        assert entry.outcome == AuditOutcome.FAILURE
        assert entry.metadata["error_type"] == "BallotingNotFoundError"
        assert "b-404" in entry.metadata["error"]

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_recorded_too(
        self, recorder: AuditTrailRecorder, emitter: AuditTrailEmitterStub
    ) -> None:
        with pytest.raises(RuntimeError):
            async with recorder.track("tc-sec", AuditAction.BALLOT_CLOSE, "balloting"):
                raise RuntimeError("connection reset")

        assert emitter.entries_for(AuditAction.BALLOT_CLOSE, AuditOutcome.FAILURE)


class TestEmitterFailures:
    @pytest.mark.asyncio
    async def test_emitter_failure_is_swallowed(
        self, recorder: AuditTrailRecorder, emitter: AuditTrailEmitterStub
    ) -> None:
        emitter.set_failure(ConnectionError("audit sink down"))
        completed = False

        async with recorder.track("tc-sec", AuditAction.BALLOT_CREATE, "balloting"):
            completed = True

        assert completed
        assert emitter.entries == []

    @pytest.mark.asyncio
    async def test_without_emitter_nothing_is_recorded(
        self, fake_time_authority: FakeTimeAuthority
    ) -> None:
        recorder = AuditTrailRecorder(None, fake_time_authority)

        await recorder.record(
            "tc-sec", AuditAction.BALLOT_CREATE, "balloting", "b-1", AuditOutcome.SUCCESS
        )
