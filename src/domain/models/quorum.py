"""Quorum subjects and results.

A quorum can be checked for a meeting or for a balloting round. The
subject is a closed set of variants resolved when the caller builds it;
the checker dispatches on the variant type.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class MeetingQuorumSubject:
    """Quorum over the attendees of a meeting."""

    meeting_id: UUID

    @property
    def label(self) -> str:
        return f"meeting {self.meeting_id}"


@dataclass(frozen=True)
class BallotingQuorumSubject:
    """Quorum over the distinct voters of a balloting round."""

    balloting_id: UUID

    @property
    def label(self) -> str:
        return f"balloting {self.balloting_id}"


QuorumSubject = MeetingQuorumSubject | BallotingQuorumSubject


@dataclass(frozen=True)
class QuorumResult:
    """Outcome of a quorum evaluation.

    Attributes:
        participating: Distinct eligible members that took part.
        eligible: Total eligible members.
        required: Minimum participants, ceil(fraction x eligible).
        required_fraction: Fraction the requirement was derived from.
    """

    participating: int
    eligible: int
    required: int
    required_fraction: float

    @property
    def met(self) -> bool:
        return self.participating >= self.required
