"""Governance policy value objects: acceptance criteria and quorum rule.

Threshold values are external configuration. These objects only validate
that a supplied value is meaningful; they carry no defaults. Out-of-range
values raise InvalidThresholdError.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from src.domain.errors.validation import InvalidThresholdError


def _as_fraction(value: float | str | Fraction) -> Fraction:
    # Going through str keeps 0.7 as 7/10 instead of its binary expansion.
    if isinstance(value, Fraction):
        return value
    return Fraction(str(value))


@dataclass(frozen=True)
class AcceptanceCriteria:
    """Acceptance criteria for a project.

    A project is accepted when approvals reach ``threshold_fraction`` of the
    eligible respondents AND disapprovals do not exceed ``max_disapprovals``.

    Attributes:
        threshold_fraction: Required share of eligible respondents, in (0, 1].
        max_disapprovals: Largest tolerated number of disapprovals, >= 0.
    """

    threshold_fraction: float
    max_disapprovals: int

    def __post_init__(self) -> None:
        """Validate threshold values.

        Raises:
            InvalidThresholdError: If either value is out of range.
        """
        if not 0 < self.threshold_fraction <= 1:
            raise InvalidThresholdError(
                f"threshold_fraction must be in (0, 1], got {self.threshold_fraction}"
            )
        if self.max_disapprovals < 0:
            raise InvalidThresholdError(
                f"max_disapprovals must be non-negative, got {self.max_disapprovals}"
            )

    @property
    def exact_threshold(self) -> Fraction:
        return _as_fraction(self.threshold_fraction)


@dataclass(frozen=True)
class QuorumPolicy:
    """Quorum rule: share of eligible members that must participate.

    Attributes:
        required_fraction: Required share, in (0, 1]. Simple majority is 0.5.
    """

    required_fraction: float

    def __post_init__(self) -> None:
        """Validate the required fraction."""
        if not 0 < self.required_fraction <= 1:
            raise InvalidThresholdError(
                f"required_fraction must be in (0, 1], got {self.required_fraction}"
            )

    @property
    def exact_fraction(self) -> Fraction:
        return _as_fraction(self.required_fraction)
