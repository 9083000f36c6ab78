"""Not-found errors for unknown identifiers."""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import GovernanceError


class NotFoundError(GovernanceError):
    """Base class for unknown-identifier errors.

    Attributes:
        resource_type: Kind of record that was looked up.
        resource_id: The identifier that was not found.
    """

    resource_type: str = "resource"

    def __init__(self, resource_id: UUID | str) -> None:
        self.resource_id = resource_id
        super().__init__(f"{self.resource_type} not found: {resource_id}")


class BallotingNotFoundError(NotFoundError):
    resource_type = "Balloting"


class VoteNotFoundError(NotFoundError):
    resource_type = "Vote"


class NSBResponseNotFoundError(NotFoundError):
    resource_type = "NSB response"


class ChangeRequestNotFoundError(NotFoundError):
    resource_type = "NSB response change request"


class AcceptanceNotFoundError(NotFoundError):
    resource_type = "Acceptance"


class MeetingNotFoundError(NotFoundError):
    resource_type = "Meeting"


class NoRecommendationError(NotFoundError):
    """Raised when verifying a project that has no FDARS recommendation."""

    resource_type = "FDARS recommendation for project"
