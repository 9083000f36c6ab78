"""Domain errors for balloting and acceptance.

Errors are grouped into five categories that callers map to responses:
ValidationError, ConflictError, StateError, NotFoundError, PolicyError.
All of them inherit from GovernanceError.
"""

from src.domain.errors.conflict import (
    AlreadyVerifiedError,
    ConcurrentModificationError,
    ConflictError,
    DuplicateChangeRequestError,
    DuplicateResponseError,
    DuplicateVoteError,
)
from src.domain.errors.not_found import (
    AcceptanceNotFoundError,
    BallotingNotFoundError,
    ChangeRequestNotFoundError,
    MeetingNotFoundError,
    NoRecommendationError,
    NotFoundError,
    NSBResponseNotFoundError,
    VoteNotFoundError,
)
from src.domain.errors.policy import (
    IneligibleVoterError,
    NoEligibleMembersError,
    PolicyError,
    ThresholdNotConfiguredError,
)
from src.domain.errors.state import (
    BallotingClosedError,
    ChangeRequestAlreadyReviewedError,
    InvalidStateTransitionError,
    StateError,
    TerminalStateError,
    VotingWindowError,
)
from src.domain.errors.validation import (
    InvalidChoiceError,
    InvalidPeriodError,
    InvalidQueryRangeError,
    InvalidResponseTypeError,
    InvalidThresholdError,
    MissingApproverError,
    NaiveDatetimeError,
    ProjectMismatchError,
    ResponderMismatchError,
    ValidationError,
)

__all__: list[str] = [
    # Categories
    "ValidationError",
    "ConflictError",
    "StateError",
    "NotFoundError",
    "PolicyError",
    # Validation
    "InvalidChoiceError",
    "InvalidPeriodError",
    "InvalidQueryRangeError",
    "InvalidResponseTypeError",
    "InvalidThresholdError",
    "MissingApproverError",
    "NaiveDatetimeError",
    "ProjectMismatchError",
    "ResponderMismatchError",
    # Conflict
    "AlreadyVerifiedError",
    "ConcurrentModificationError",
    "DuplicateChangeRequestError",
    "DuplicateResponseError",
    "DuplicateVoteError",
    # State
    "BallotingClosedError",
    "ChangeRequestAlreadyReviewedError",
    "InvalidStateTransitionError",
    "TerminalStateError",
    "VotingWindowError",
    # Not found
    "AcceptanceNotFoundError",
    "BallotingNotFoundError",
    "ChangeRequestNotFoundError",
    "MeetingNotFoundError",
    "NoRecommendationError",
    "NSBResponseNotFoundError",
    "VoteNotFoundError",
    # Policy
    "IneligibleVoterError",
    "NoEligibleMembersError",
    "ThresholdNotConfiguredError",
]
