"""Unit tests for versioned acceptance snapshots."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domain.models.acceptance import (
    Acceptance,
    AcceptanceCriteriaSnapshot,
    AcceptanceDecision,
)

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)
T1 = T0 + timedelta(days=1)


def _snapshot(approvals: int = 6, disapprovals: int = 1, total: int = 8) -> AcceptanceCriteriaSnapshot:
    return AcceptanceCriteriaSnapshot(
        approvals=approvals,
        disapprovals=disapprovals,
        total_responses=total,
        total_eligible=10,
    )


class TestSnapshot:
    def test_approval_rate(self) -> None:
        assert _snapshot(6, 1, 8).approval_rate == pytest.approx(0.75)

    def test_approval_rate_without_responses_is_zero(self) -> None:
        assert AcceptanceCriteriaSnapshot().approval_rate == 0.0

    def test_counts_cannot_exceed_total(self) -> None:
        with pytest.raises(ValueError, match="exceed total_responses"):
            _snapshot(approvals=5, disapprovals=4, total=8)

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValueError, match="approvals must be non-negative"):
            AcceptanceCriteriaSnapshot(approvals=-1)


class TestPendingSnapshot:
    def test_first_snapshot_is_version_one_and_pending(self) -> None:
        acceptance = Acceptance.first("PRJ-001", _snapshot(), T0)

        assert acceptance.version == 1
        assert acceptance.decision == AcceptanceDecision.PENDING
        assert acceptance.supersedes_id is None

    def test_refresh_while_pending_updates_in_place(self) -> None:
        acceptance = Acceptance.first("PRJ-001", _snapshot(), T0)

        refreshed = acceptance.refreshed(_snapshot(7, 1, 9), T1)

        assert refreshed.id == acceptance.id
        assert refreshed.version == 1
        assert refreshed.snapshot.approvals == 7
        assert refreshed.updated_at == T1

    def test_decide_while_pending_updates_in_place(self) -> None:
        acceptance = Acceptance.first("PRJ-001", _snapshot(), T0)

        decided = acceptance.decided(AcceptanceDecision.ACCEPTED, "tc-sec", T1)

        assert decided.id == acceptance.id
        assert decided.decision == AcceptanceDecision.ACCEPTED
        assert decided.tc_secretary_id == "tc-sec"
        assert decided.decided_at == T1


class TestDecidedSnapshot:
    @pytest.fixture
    def decided(self) -> Acceptance:
        return Acceptance.first("PRJ-001", _snapshot(), T0).decided(
            AcceptanceDecision.REJECTED, "tc-sec", T0
        )

    def test_refresh_supersedes_with_pending_version(self, decided: Acceptance) -> None:
        refreshed = decided.refreshed(_snapshot(8, 0, 8), T1)

        assert refreshed.id != decided.id
        assert refreshed.version == 2
        assert refreshed.supersedes_id == decided.id
        assert refreshed.decision == AcceptanceDecision.PENDING
        assert refreshed.decided_at is None

    def test_redecide_supersedes_and_keeps_counts(self, decided: Acceptance) -> None:
        redecided = decided.decided(AcceptanceDecision.ACCEPTED, "tc-sec-2", T1)

        assert redecided.version == 2
        assert redecided.supersedes_id == decided.id
        assert redecided.snapshot == decided.snapshot
        assert redecided.decision == AcceptanceDecision.ACCEPTED
        assert redecided.tc_secretary_id == "tc-sec-2"
        assert redecided.decided_at == T1
        # The audited version is untouched.
        assert decided.decision == AcceptanceDecision.REJECTED
