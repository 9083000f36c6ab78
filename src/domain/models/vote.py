"""Vote domain model and tally aggregation.

A member casts at most one vote per balloting. The voter, balloting,
project and cast-at fields never change after creation; only the choice
and comment can be revised, and only while the balloting is OPEN (the
service layer checks the balloting status).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from src.domain.errors.validation import InvalidChoiceError


class VoteChoice(Enum):
    """Choices available to a voting member."""

    APPROVE = "APPROVE"
    DISAPPROVE = "DISAPPROVE"
    ABSTAIN = "ABSTAIN"

    @classmethod
    def parse(cls, value: VoteChoice | str) -> VoteChoice:
        """Resolve a choice from an enum member or its (case-insensitive) name.

        Raises:
            InvalidChoiceError: If the value is not one of the three choices.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidChoiceError(value)


@dataclass(frozen=True, eq=True)
class Vote:
    """A single vote cast by a member in a balloting round.

    Attributes:
        id: Unique identifier.
        balloting_id: The balloting round (immutable).
        project_id: The project being balloted (immutable).
        member_id: The voting member (immutable).
        choice: Current choice.
        cast_at: When the vote was first cast (immutable).
        comment: Optional free-text comment.
        updated_at: When the choice/comment was last revised.
    """

    id: UUID
    balloting_id: UUID
    project_id: str
    member_id: str
    choice: VoteChoice
    cast_at: datetime
    comment: str = field(default="")
    updated_at: datetime | None = field(default=None)

    @classmethod
    def cast(
        cls,
        balloting_id: UUID,
        project_id: str,
        member_id: str,
        choice: VoteChoice,
        comment: str,
        cast_at: datetime,
    ) -> Vote:
        return cls(
            id=uuid4(),
            balloting_id=balloting_id,
            project_id=project_id,
            member_id=member_id,
            choice=choice,
            cast_at=cast_at,
            comment=comment,
        )

    def revise(self, choice: VoteChoice, comment: str, at: datetime) -> Vote:
        """Return a copy with a new choice and comment; identity fields are kept."""
        return replace(self, choice=choice, comment=comment, updated_at=at)


@dataclass(frozen=True, eq=True)
class VoteTally:
    """Aggregated vote counts for a balloting round.

    Attributes:
        balloting_id: The balloting that was tallied.
        approve: Number of APPROVE votes.
        disapprove: Number of DISAPPROVE votes.
        abstain: Number of ABSTAIN votes.
        total: Total votes; always approve + disapprove + abstain.
        distinct_voters: Distinct members that voted.
    """

    balloting_id: UUID
    approve: int = 0
    disapprove: int = 0
    abstain: int = 0
    total: int = 0
    distinct_voters: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate that the components sum to the total."""
        if self.approve + self.disapprove + self.abstain != self.total:
            raise ValueError(
                f"Tally components ({self.approve}+{self.disapprove}+{self.abstain}) "
                f"do not sum to total {self.total}"
            )

    @classmethod
    def from_votes(cls, balloting_id: UUID, votes: Iterable[Vote]) -> VoteTally:
        counts = {choice: 0 for choice in VoteChoice}
        voters: set[str] = set()
        for vote in votes:
            counts[vote.choice] += 1
            voters.add(vote.member_id)
        return cls(
            balloting_id=balloting_id,
            approve=counts[VoteChoice.APPROVE],
            disapprove=counts[VoteChoice.DISAPPROVE],
            abstain=counts[VoteChoice.ABSTAIN],
            total=sum(counts.values()),
            distinct_voters=frozenset(voters),
        )
