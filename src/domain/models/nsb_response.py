"""NSB response domain models.

A National Standards Body (NSB) records one response per project. Both
APPROVE variants count as approvals in acceptance statistics; DISAPPROVE
counts against. A responder may later ask the TC secretariat to change a
recorded response through an NSBResponseChangeRequest.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from src.domain.errors.state import ChangeRequestAlreadyReviewedError
from src.domain.errors.validation import InvalidResponseTypeError


class NSBResponseType(Enum):
    """Response types an NSB can submit on a proposal."""

    APPROVE_NO_COMMENT = "APPROVE_NO_COMMENT"
    APPROVE_WITH_COMMENT = "APPROVE_WITH_COMMENT"
    DISAPPROVE = "DISAPPROVE"

    @property
    def is_approval(self) -> bool:
        return self in APPROVAL_TYPES

    @classmethod
    def parse(cls, value: NSBResponseType | str) -> NSBResponseType:
        """Resolve a response type from an enum member or its name.

        Raises:
            InvalidResponseTypeError: If the value is not recognised.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidResponseTypeError(value)


APPROVAL_TYPES: frozenset[NSBResponseType] = frozenset(
    {NSBResponseType.APPROVE_NO_COMMENT, NSBResponseType.APPROVE_WITH_COMMENT}
)


@dataclass(frozen=True, eq=True)
class NSBResponse:
    """A National Standards Body response on a project.

    Attributes:
        id: Unique identifier.
        project_id: The project responded to.
        responder_id: The responding member (one response per project).
        response_type: Approve (with/without comment) or disapprove.
        submitted_at: Submission timestamp (UTC).
        comments: Free-text comments.
        is_committed_to_participate: Whether the NSB commits to the work.
        updated_at: Set when an approved change request rewrote the type.
    """

    id: UUID
    project_id: str
    responder_id: str
    response_type: NSBResponseType
    submitted_at: datetime
    comments: str = field(default="")
    is_committed_to_participate: bool = field(default=False)
    updated_at: datetime | None = field(default=None)

    @classmethod
    def submit(
        cls,
        project_id: str,
        responder_id: str,
        response_type: NSBResponseType,
        comments: str,
        submitted_at: datetime,
        is_committed_to_participate: bool = False,
    ) -> NSBResponse:
        return cls(
            id=uuid4(),
            project_id=project_id,
            responder_id=responder_id,
            response_type=response_type,
            submitted_at=submitted_at,
            comments=comments,
            is_committed_to_participate=is_committed_to_participate,
        )

    @property
    def has_comments(self) -> bool:
        return bool(self.comments.strip())

    def with_response_type(self, response_type: NSBResponseType, at: datetime) -> NSBResponse:
        return replace(self, response_type=response_type, updated_at=at)


class ChangeRequestStatus(Enum):
    """Review status of a response change request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True, eq=True)
class NSBResponseChangeRequest:
    """A responder's request to change a recorded NSB response.

    Attributes:
        id: Unique identifier.
        response_id: The NSB response to change.
        responder_id: The member asking for the change.
        requested_type: The response type the responder wants instead.
        created_at: When the request was raised.
        status: PENDING until a TC secretariat member reviews it.
        reviewed_by: Reviewer, once reviewed.
        review_comment: Reviewer's comment.
        reviewed_at: Review timestamp.
    """

    id: UUID
    response_id: UUID
    responder_id: str
    requested_type: NSBResponseType
    created_at: datetime
    status: ChangeRequestStatus = field(default=ChangeRequestStatus.PENDING)
    reviewed_by: str | None = field(default=None)
    review_comment: str = field(default="")
    reviewed_at: datetime | None = field(default=None)

    @classmethod
    def raise_for(
        cls,
        response: NSBResponse,
        requested_type: NSBResponseType,
        created_at: datetime,
    ) -> NSBResponseChangeRequest:
        return cls(
            id=uuid4(),
            response_id=response.id,
            responder_id=response.responder_id,
            requested_type=requested_type,
            created_at=created_at,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == ChangeRequestStatus.PENDING

    def reviewed(
        self, approve: bool, reviewer_id: str, comment: str, at: datetime
    ) -> NSBResponseChangeRequest:
        """Return the reviewed copy of a pending request.

        Raises:
            ChangeRequestAlreadyReviewedError: If already approved or rejected.
        """
        if not self.is_pending:
            raise ChangeRequestAlreadyReviewedError(self.id, self.status.value)
        return replace(
            self,
            status=ChangeRequestStatus.APPROVED if approve else ChangeRequestStatus.REJECTED,
            reviewed_by=reviewer_id,
            review_comment=comment,
            reviewed_at=at,
        )
