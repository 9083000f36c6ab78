"""Acceptance criteria policy.

A project is accepted when approvals reach the configured fraction of
eligible respondents AND disapprovals stay within the configured cap.
Comparisons use exact rational arithmetic so that, for example, 7 of 10
against a 0.7 threshold is accepted.
"""

from __future__ import annotations

from fractions import Fraction

from src.domain.errors.policy import NoEligibleMembersError
from src.domain.models.acceptance import AcceptanceCriteriaResult
from src.domain.models.governance_policy import AcceptanceCriteria


def evaluate_acceptance(
    approvals: int,
    disapprovals: int,
    total_eligible: int,
    criteria: AcceptanceCriteria,
    subject: str = "acceptance",
) -> AcceptanceCriteriaResult:
    """Evaluate acceptance criteria against a set of counts.

    Args:
        approvals: Number of approvals.
        disapprovals: Number of disapprovals.
        total_eligible: Number of eligible respondents.
        criteria: Threshold fraction and disapproval cap.
        subject: Description used in error messages.

    Returns:
        AcceptanceCriteriaResult with the met flag and a summary message.

    Raises:
        NoEligibleMembersError: If total_eligible is zero.
    """
    if total_eligible <= 0:
        raise NoEligibleMembersError(subject)

    rate = Fraction(approvals, total_eligible)
    threshold_met = rate >= criteria.exact_threshold
    disapprovals_ok = disapprovals <= criteria.max_disapprovals
    criteria_met = threshold_met and disapprovals_ok

    if criteria_met:
        message = (
            f"Project accepted with {float(rate) * 100:.1f}% approval "
            f"(required: {criteria.threshold_fraction * 100:.1f}%)"
        )
    elif not threshold_met:
        message = (
            f"Project not accepted. Current approval: {float(rate) * 100:.1f}% "
            f"(required: {criteria.threshold_fraction * 100:.1f}%)"
        )
    else:
        message = (
            f"Project not accepted. {disapprovals} disapprovals exceed the "
            f"maximum of {criteria.max_disapprovals}"
        )

    return AcceptanceCriteriaResult(
        criteria_met=criteria_met,
        acceptance_rate=float(rate),
        required_rate=criteria.threshold_fraction,
        approvals=approvals,
        disapprovals=disapprovals,
        total_eligible=total_eligible,
        max_disapprovals=criteria.max_disapprovals,
        message=message,
    )
