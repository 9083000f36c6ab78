"""Unit tests for the acceptance criteria and quorum policies.

Both policies compare exact rationals, so boundary values such as 7 of 10
against 0.7 land on the accepting side.
"""

import pytest

from src.domain.errors import InvalidThresholdError, NoEligibleMembersError
from src.domain.models.acceptance import AcceptanceDecision
from src.domain.models.governance_policy import AcceptanceCriteria, QuorumPolicy
from src.domain.services import (
    evaluate_acceptance,
    evaluate_quorum,
    required_participants,
)


class TestAcceptanceCriteriaValidation:
    @pytest.mark.parametrize("fraction", [0, -0.1, 1.01])
    def test_threshold_must_be_in_unit_interval(self, fraction: float) -> None:
        with pytest.raises(InvalidThresholdError, match="threshold_fraction"):
            AcceptanceCriteria(threshold_fraction=fraction, max_disapprovals=0)

    def test_negative_disapproval_cap_rejected(self) -> None:
        with pytest.raises(InvalidThresholdError, match="max_disapprovals"):
            AcceptanceCriteria(threshold_fraction=0.5, max_disapprovals=-1)

    def test_exact_threshold_is_decimal_not_binary(self) -> None:
        criteria = AcceptanceCriteria(threshold_fraction=0.7, max_disapprovals=0)

        assert criteria.exact_threshold.numerator == 7
        assert criteria.exact_threshold.denominator == 10


class TestEvaluateAcceptance:
    @pytest.fixture
    def criteria(self) -> AcceptanceCriteria:
        return AcceptanceCriteria(threshold_fraction=0.7, max_disapprovals=2)

    def test_exact_threshold_accepts(self, criteria: AcceptanceCriteria) -> None:
        result = evaluate_acceptance(7, 1, 10, criteria)

        assert result.criteria_met
        assert result.decision == AcceptanceDecision.ACCEPTED
        assert result.acceptance_rate == pytest.approx(0.7)

    def test_just_below_threshold_rejects(self, criteria: AcceptanceCriteria) -> None:
        result = evaluate_acceptance(6, 0, 10, criteria)

        assert not result.criteria_met
        assert result.decision == AcceptanceDecision.REJECTED
        assert "required: 70.0%" in result.message

    def test_too_many_disapprovals_rejects(self, criteria: AcceptanceCriteria) -> None:
        result = evaluate_acceptance(9, 3, 12, criteria)

        assert not result.criteria_met
        assert "3 disapprovals exceed the maximum of 2" in result.message

    def test_disapprovals_at_cap_still_accepts(
        self, criteria: AcceptanceCriteria
    ) -> None:
        assert evaluate_acceptance(8, 2, 10, criteria).criteria_met

    def test_one_third_threshold_is_exact(self) -> None:
        criteria = AcceptanceCriteria(threshold_fraction=1 / 3, max_disapprovals=5)

        assert evaluate_acceptance(1, 0, 3, criteria).criteria_met

    def test_zero_eligible_raises(self, criteria: AcceptanceCriteria) -> None:
        with pytest.raises(NoEligibleMembersError):
            evaluate_acceptance(0, 0, 0, criteria, subject="project PRJ-001")


class TestQuorumPolicy:
    @pytest.mark.parametrize(
        ("eligible", "fraction", "required"),
        [
            (10, 0.5, 5),
            (7, 0.5, 4),
            (3, 2 / 3, 2),
            (10, 0.7, 7),
            (1, 0.5, 1),
            (4, 1.0, 4),
        ],
    )
    def test_required_is_ceiling(
        self, eligible: int, fraction: float, required: int
    ) -> None:
        assert required_participants(eligible, QuorumPolicy(fraction)) == required

    def test_met_at_requirement(self) -> None:
        result = evaluate_quorum(4, 7, QuorumPolicy(0.5))

        assert result.required == 4
        assert result.met

    def test_not_met_below_requirement(self) -> None:
        assert not evaluate_quorum(3, 7, QuorumPolicy(0.5)).met

    def test_zero_eligible_is_never_vacuously_met(self) -> None:
        with pytest.raises(NoEligibleMembersError):
            evaluate_quorum(0, 0, QuorumPolicy(0.5), subject="meeting m-1")

    @pytest.mark.parametrize("fraction", [0, 1.5])
    def test_fraction_validated(self, fraction: float) -> None:
        with pytest.raises(InvalidThresholdError):
            QuorumPolicy(fraction)
