"""Validation errors for malformed governance input.

Raised synchronously when a caller supplies data that can never be valid
regardless of stored state: reversed periods, unknown enumeration values,
missing approvers.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.domain.exceptions import GovernanceError


class ValidationError(GovernanceError):
    """Base class for malformed-input errors."""

    pass


class InvalidPeriodError(ValidationError):
    """Raised when a balloting period does not end after it starts.

    Attributes:
        start_date: Requested start of the period.
        end_date: Requested end of the period.
    """

    def __init__(self, start_date: datetime, end_date: datetime) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Invalid period: end date {end_date.isoformat()} must be after "
            f"start date {start_date.isoformat()}"
        )


class InvalidQueryRangeError(ValidationError):
    """Raised when a period query range is reversed."""

    def __init__(self, start_date: datetime, end_date: datetime) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Invalid query range: {end_date.isoformat()} is before "
            f"{start_date.isoformat()}"
        )


class InvalidChoiceError(ValidationError):
    """Raised when a vote choice is not one of the enumerated values.

    Attributes:
        choice: The rejected raw value.
    """

    def __init__(self, choice: object) -> None:
        self.choice = choice
        super().__init__(
            f"Invalid vote choice: {choice!r}. "
            "Expected one of: APPROVE, DISAPPROVE, ABSTAIN"
        )


class InvalidResponseTypeError(ValidationError):
    """Raised when an NSB response type is not recognised."""

    def __init__(self, response_type: object) -> None:
        self.response_type = response_type
        super().__init__(
            f"Invalid NSB response type: {response_type!r}. Expected one of: "
            "APPROVE_NO_COMMENT, APPROVE_WITH_COMMENT, DISAPPROVE"
        )


class ProjectMismatchError(ValidationError):
    """Raised when a vote names a project other than the balloting's project."""

    def __init__(
        self, balloting_id: UUID, expected_project_id: str, actual_project_id: str
    ) -> None:
        self.balloting_id = balloting_id
        self.expected_project_id = expected_project_id
        self.actual_project_id = actual_project_id
        super().__init__(
            f"Balloting {balloting_id} belongs to project {expected_project_id}, "
            f"not {actual_project_id}"
        )


class MissingApproverError(ValidationError):
    """Raised when an acceptance decision is requested without a TC secretary."""

    def __init__(self, acceptance_id: UUID) -> None:
        self.acceptance_id = acceptance_id
        super().__init__(
            f"Acceptance {acceptance_id} cannot be decided without a TC secretary"
        )


class ResponderMismatchError(ValidationError):
    """Raised when someone other than the original responder asks for a change."""

    def __init__(self, response_id: UUID, responder_id: str, actor_id: str) -> None:
        self.response_id = response_id
        self.responder_id = responder_id
        self.actor_id = actor_id
        super().__init__(
            f"Only responder {responder_id} may request a change to "
            f"NSB response {response_id} (requested by {actor_id})"
        )


class NaiveDatetimeError(ValidationError):
    """Raised when a date carries no timezone.

    Attributes:
        field_name: Name of the offending argument.
        value: The rejected datetime.
    """

    def __init__(self, field_name: str, value: datetime) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"{field_name} must be timezone-aware, got naive {value.isoformat()}"
        )


class InvalidThresholdError(ValidationError):
    """Raised when a caller-supplied threshold or quorum fraction is out of range.

    Attributes:
        reason: Why the value was rejected.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid threshold: {reason}")
