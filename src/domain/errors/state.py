"""Lifecycle state errors for ballotings and review workflows."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.domain.exceptions import GovernanceError

if TYPE_CHECKING:
    from src.domain.models.balloting import BallotingStatus


class StateError(GovernanceError):
    """Base class for operations invalid in the current lifecycle state."""

    pass


class InvalidStateTransitionError(StateError):
    """Raised when a balloting transition is outside the transition matrix.

    Attributes:
        from_status: Current status.
        to_status: Attempted target status.
        allowed_transitions: Valid targets from the current status.
    """

    def __init__(
        self,
        from_status: BallotingStatus,
        to_status: BallotingStatus,
        allowed_transitions: list[BallotingStatus] | None = None,
    ) -> None:
        self.from_status = from_status
        self.to_status = to_status
        self.allowed_transitions = allowed_transitions or []

        allowed_str = (
            f" Valid transitions: {[s.value for s in self.allowed_transitions]}"
            if self.allowed_transitions
            else ""
        )
        super().__init__(
            f"Invalid state transition: {from_status.value} -> {to_status.value}.{allowed_str}"
        )


class BallotingClosedError(StateError):
    """Raised when votes are cast, revised or removed outside an open balloting."""

    def __init__(self, balloting_id: UUID, status: BallotingStatus) -> None:
        self.balloting_id = balloting_id
        self.status = status
        super().__init__(
            f"Balloting {balloting_id} is {status.value}; votes can only change "
            "while it is OPEN"
        )


class TerminalStateError(StateError):
    """Raised when an operation needs a balloting state it is no longer in.

    Covers edits to CLOSED/CANCELLED ballotings and deletion of anything
    that has left DRAFT.
    """

    def __init__(self, balloting_id: UUID, status: BallotingStatus, operation: str) -> None:
        self.balloting_id = balloting_id
        self.status = status
        self.operation = operation
        super().__init__(
            f"Cannot {operation} balloting {balloting_id} in state {status.value}"
        )


class VotingWindowError(StateError):
    """Raised when a vote arrives outside the balloting's voting window."""

    def __init__(
        self,
        balloting_id: UUID,
        at: datetime,
        window_start: datetime,
        window_end: datetime,
    ) -> None:
        self.balloting_id = balloting_id
        self.at = at
        self.window_start = window_start
        self.window_end = window_end
        super().__init__(
            f"Balloting {balloting_id} accepts votes from {window_start.isoformat()} "
            f"until {window_end.isoformat()}; got {at.isoformat()}"
        )


class ChangeRequestAlreadyReviewedError(StateError):
    """Raised when a reviewed change request is reviewed again."""

    def __init__(self, request_id: UUID, status: str) -> None:
        self.request_id = request_id
        self.status = status
        super().__init__(f"Change request {request_id} is already {status}")
