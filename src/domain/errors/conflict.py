"""Conflict errors for uniqueness and version clashes.

These are raised when the persistent store rejects a write because an
equivalent record already exists, or because the record changed underneath
the caller.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import GovernanceError


class ConflictError(GovernanceError):
    """Base class for conflict errors."""

    pass


class DuplicateVoteError(ConflictError):
    """Raised when a member has already voted in a balloting.

    Attributes:
        balloting_id: The balloting round.
        member_id: The member who already voted.
    """

    def __init__(self, balloting_id: UUID, member_id: str) -> None:
        self.balloting_id = balloting_id
        self.member_id = member_id
        super().__init__(
            f"Member {member_id} has already voted in balloting {balloting_id}"
        )


class DuplicateResponseError(ConflictError):
    """Raised when a responder already submitted an NSB response for a project."""

    def __init__(self, project_id: str, responder_id: str) -> None:
        self.project_id = project_id
        self.responder_id = responder_id
        super().__init__(
            f"Responder {responder_id} has already responded for project {project_id}"
        )


class DuplicateChangeRequestError(ConflictError):
    """Raised when a pending change request already exists for a response."""

    def __init__(self, response_id: UUID) -> None:
        self.response_id = response_id
        super().__init__(
            f"NSB response {response_id} already has a pending change request"
        )


class AlreadyVerifiedError(ConflictError):
    """Raised when an FDARS recommendation has already been verified.

    Attributes:
        project_id: The project whose recommendation was verified.
        verified_by: Who verified it.
    """

    def __init__(self, project_id: str, verified_by: str | None) -> None:
        self.project_id = project_id
        self.verified_by = verified_by
        super().__init__(
            f"FDARS recommendation for project {project_id} already verified "
            f"by {verified_by}"
        )


class ConcurrentModificationError(ConflictError):
    """Raised when a record changed since the caller last read it.

    This is a recoverable error - the caller should re-read and decide
    whether to retry.

    Attributes:
        resource_type: Kind of record (e.g. "fdars_recommendation").
        resource_id: Identifier of the record.
        expected_version: Version the caller expected.
        actual_version: Version found in the store.
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        expected_version: int,
        actual_version: int,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification of {resource_type} {resource_id}: "
            f"expected version {expected_version}, found {actual_version}"
        )
