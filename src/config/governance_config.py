"""Governance threshold configuration.

Acceptance thresholds and quorum fractions are governance rules owned by
the standards organisation, so nothing here ships a default. A policy left
unset stays ``None`` and the operation that needs it raises
ThresholdNotConfiguredError.

Environment Variables:
- ACCEPTANCE_THRESHOLD_FRACTION: Share of eligible NSBs that must approve, in (0, 1]
- ACCEPTANCE_MAX_DISAPPROVALS: Largest tolerated number of disapprovals
- QUORUM_REQUIRED_FRACTION: Share of eligible members required for quorum, in (0, 1]

The two acceptance variables must be set together.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.domain.errors import InvalidThresholdError
from src.domain.models.governance_policy import AcceptanceCriteria, QuorumPolicy


def _get_optional_int_env(key: str) -> int | None:
    """Get an integer environment variable, or None when unset.

    Raises:
        ValueError: If the variable is set but not an integer.
    """
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def _get_optional_float_env(key: str) -> float | None:
    """Get a float environment variable, or None when unset.

    Raises:
        ValueError: If the variable is set but not a number.
    """
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class GovernanceConfig:
    """Thresholds used by balloting close, acceptance and quorum checks.

    Attributes:
        acceptance_criteria: Acceptance threshold and disapproval cap, or None.
        quorum: Quorum rule, or None.
    """

    acceptance_criteria: AcceptanceCriteria | None = None
    quorum: QuorumPolicy | None = None

    @classmethod
    def from_environment(cls) -> GovernanceConfig:
        """Load thresholds from environment variables.

        Returns:
            GovernanceConfig with whichever policies are configured.

        Raises:
            ValueError: If a variable is malformed, out of range, or only one
                of the two acceptance variables is set.
        """
        threshold = _get_optional_float_env("ACCEPTANCE_THRESHOLD_FRACTION")
        max_disapprovals = _get_optional_int_env("ACCEPTANCE_MAX_DISAPPROVALS")
        quorum_fraction = _get_optional_float_env("QUORUM_REQUIRED_FRACTION")

        if (threshold is None) != (max_disapprovals is None):
            raise ValueError(
                "ACCEPTANCE_THRESHOLD_FRACTION and ACCEPTANCE_MAX_DISAPPROVALS "
                "must be set together"
            )

        try:
            criteria = (
                AcceptanceCriteria(
                    threshold_fraction=threshold, max_disapprovals=max_disapprovals
                )
                if threshold is not None and max_disapprovals is not None
                else None
            )
            quorum = (
                QuorumPolicy(required_fraction=quorum_fraction)
                if quorum_fraction is not None
                else None
            )
        except InvalidThresholdError as exc:
            raise ValueError(f"Invalid governance configuration: {exc}") from exc
        return cls(acceptance_criteria=criteria, quorum=quorum)
