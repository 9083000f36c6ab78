"""Balloting domain model - a timed voting round on a standards project.

State Machine:
    DRAFT -> OPEN -> CLOSED
    DRAFT -> CANCELLED
    OPEN -> CANCELLED

CLOSED and CANCELLED are terminal. A balloting's dates may only change
while it is not terminal, and it may only be deleted while DRAFT.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from uuid import UUID, uuid4

from src.domain.errors.state import InvalidStateTransitionError, TerminalStateError
from src.domain.errors.validation import InvalidPeriodError, NaiveDatetimeError

# End dates are calendar days: a balloting ending on the 10th still
# accepts votes and matches period queries for the whole of the 10th.
END_OF_DAY = timedelta(hours=24)


class BallotingStatus(Enum):
    """Status in the balloting lifecycle.

    States:
        DRAFT: Created, not yet accepting votes
        OPEN: Accepting votes
        CLOSED: Voting finished, tally is final (terminal)
        CANCELLED: Abandoned before a result (terminal)
    """

    DRAFT = "DRAFT"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"

    def is_terminal(self) -> bool:
        """Check if no further transitions are permitted from this status."""
        return self in TERMINAL_STATUSES

    def valid_transitions(self) -> frozenset[BallotingStatus]:
        """Get valid target statuses from this status.

        Returns:
            Frozenset of reachable statuses. Empty for terminal statuses.
        """
        return STATUS_TRANSITION_MATRIX.get(self, frozenset())


TERMINAL_STATUSES: frozenset[BallotingStatus] = frozenset(
    {BallotingStatus.CLOSED, BallotingStatus.CANCELLED}
)

STATUS_TRANSITION_MATRIX: dict[BallotingStatus, frozenset[BallotingStatus]] = {
    BallotingStatus.DRAFT: frozenset(
        {BallotingStatus.OPEN, BallotingStatus.CANCELLED}
    ),
    BallotingStatus.OPEN: frozenset(
        {BallotingStatus.CLOSED, BallotingStatus.CANCELLED}
    ),
    BallotingStatus.CLOSED: frozenset(),
    BallotingStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True, eq=True)
class Balloting:
    """A balloting round on a project.

    Frozen: every change produces a new instance through ``with_status``
    or ``with_period``, which enforce the transition matrix.

    Attributes:
        id: Unique identifier.
        project_id: The project being balloted.
        start_date: When voting opens (UTC).
        end_date: Last calendar day of voting (UTC), strictly after start.
        created_by: Actor who created the round.
        created_at: Creation timestamp (UTC).
        status: Current lifecycle status.
        updated_at: Last modification timestamp, if any.
    """

    id: UUID
    project_id: str
    start_date: datetime
    end_date: datetime
    created_by: str
    created_at: datetime
    status: BallotingStatus = field(default=BallotingStatus.DRAFT)
    updated_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate the voting period."""
        if self.start_date.tzinfo is None:
            raise NaiveDatetimeError("start_date", self.start_date)
        if self.end_date.tzinfo is None:
            raise NaiveDatetimeError("end_date", self.end_date)
        if self.end_date <= self.start_date:
            raise InvalidPeriodError(self.start_date, self.end_date)

    @classmethod
    def create(
        cls,
        project_id: str,
        start_date: datetime,
        end_date: datetime,
        created_by: str,
        created_at: datetime,
    ) -> Balloting:
        """Create a new DRAFT balloting.

        Raises:
            NaiveDatetimeError: If either date has no timezone.
            InvalidPeriodError: If end_date is not after start_date.
        """
        return cls(
            id=uuid4(),
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            created_by=created_by,
            created_at=created_at,
        )

    @property
    def is_open(self) -> bool:
        return self.status == BallotingStatus.OPEN

    @property
    def voting_window(self) -> tuple[datetime, datetime]:
        """Half-open interval ``[start, end + 24h)`` in which votes are accepted."""
        return self.start_date, self.end_date + END_OF_DAY

    def accepts_votes_at(self, at: datetime) -> bool:
        window_start, window_end = self.voting_window
        return window_start <= at < window_end

    def intersects(self, start: datetime, end: datetime) -> bool:
        """Check whether this round overlaps a query range.

        The query end is a calendar day and is widened to end-of-day.
        """
        return self.start_date < end + END_OF_DAY and self.end_date >= start

    def with_status(self, new_status: BallotingStatus, at: datetime) -> Balloting:
        """Return a copy moved to ``new_status``.

        Raises:
            InvalidStateTransitionError: If the matrix forbids the move.
        """
        allowed = self.status.valid_transitions()
        if new_status not in allowed:
            raise InvalidStateTransitionError(
                from_status=self.status,
                to_status=new_status,
                allowed_transitions=sorted(allowed, key=lambda s: s.value),
            )
        return replace(self, status=new_status, updated_at=at)

    def with_period(
        self, start_date: datetime, end_date: datetime, at: datetime
    ) -> Balloting:
        """Return a copy with a new voting period.

        Raises:
            TerminalStateError: If the balloting is CLOSED or CANCELLED.
            InvalidPeriodError: If end_date is not after start_date.
        """
        if self.status.is_terminal():
            raise TerminalStateError(self.id, self.status, operation="update")
        return replace(self, start_date=start_date, end_date=end_date, updated_at=at)
