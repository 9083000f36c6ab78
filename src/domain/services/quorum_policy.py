"""Quorum policy: participants >= ceil(required_fraction x eligible)."""

from __future__ import annotations

import math

from src.domain.errors.policy import NoEligibleMembersError
from src.domain.models.governance_policy import QuorumPolicy
from src.domain.models.quorum import QuorumResult


def required_participants(eligible: int, policy: QuorumPolicy) -> int:
    """Minimum number of participants for quorum.

    Raises:
        NoEligibleMembersError: If eligible is zero.
    """
    if eligible <= 0:
        raise NoEligibleMembersError("quorum")
    return math.ceil(policy.exact_fraction * eligible)


def evaluate_quorum(
    participating: int,
    eligible: int,
    policy: QuorumPolicy,
    subject: str = "quorum",
) -> QuorumResult:
    """Evaluate quorum for a participation count.

    Args:
        participating: Distinct eligible members that took part.
        eligible: Total eligible members.
        policy: Required fraction.
        subject: Description used in error messages.

    Raises:
        NoEligibleMembersError: If eligible is zero.
    """
    if eligible <= 0:
        raise NoEligibleMembersError(subject)
    return QuorumResult(
        participating=participating,
        eligible=eligible,
        required=required_participants(eligible, policy),
        required_fraction=policy.required_fraction,
    )
