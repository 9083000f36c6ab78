"""NSB response change requests.

A responder may ask to change a recorded NSB response. The TC
secretariat reviews the request; an approved request rewrites the
response type in the same unit of work as the review, so the response
and the request never disagree. Only one PENDING request per response
may exist at a time, enforced by the store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from structlog import get_logger

from src.domain.errors import (
    ChangeRequestNotFoundError,
    NSBResponseNotFoundError,
    ResponderMismatchError,
)
from src.domain.models.audit_trail import AuditAction
from src.domain.models.nsb_response import NSBResponseChangeRequest, NSBResponseType

if TYPE_CHECKING:
    from src.application.ports.governance_store import GovernanceStoreProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol
    from src.application.services.audit_trail_recorder import AuditTrailRecorder

logger = get_logger(__name__)

_CHANGE_REQUEST = "nsb_response_change_request"


class NSBResponseChangeService:
    """Raises and reviews NSB response change requests."""

    def __init__(
        self,
        store: GovernanceStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        audit: AuditTrailRecorder,
    ) -> None:
        self._store = store
        self._time = time_authority
        self._audit = audit

    async def request_change(
        self,
        response_id: UUID,
        requested_type: NSBResponseType | str,
        actor_id: str,
    ) -> NSBResponseChangeRequest:
        """Ask to change a recorded response.

        Args:
            response_id: Response to change.
            requested_type: The desired response type.
            actor_id: Must be the original responder.

        Raises:
            InvalidResponseTypeError: requested_type is not recognised.
            NSBResponseNotFoundError: No such response.
            ResponderMismatchError: actor_id is not the responder.
            DuplicateChangeRequestError: A PENDING request already exists.
        """
        async with self._audit.track(
            actor_id,
            AuditAction.NSB_RESPONSE_CHANGE_REQUEST,
            _CHANGE_REQUEST,
            response_id=str(response_id),
        ) as scope:
            parsed = NSBResponseType.parse(requested_type)
            async with self._store.transaction() as uow:
                response = await uow.nsb_responses.get(response_id)
                if response is None:
                    raise NSBResponseNotFoundError(response_id)
                if response.responder_id != actor_id:
                    raise ResponderMismatchError(
                        response_id, response.responder_id, actor_id
                    )
                request = NSBResponseChangeRequest.raise_for(
                    response, parsed, self._time.now()
                )
                await uow.change_requests.add(request)

            scope.resource_id = str(request.id)
            scope.metadata["requested_type"] = parsed.value

        logger.info(
            "nsb_response_change_requested",
            request_id=str(request.id),
            response_id=str(response_id),
            requested_type=parsed.value,
        )
        return request

    async def review_change(
        self,
        request_id: UUID,
        approve: bool,
        reviewer_id: str,
        comment: str = "",
    ) -> NSBResponseChangeRequest:
        """Approve or reject a pending change request.

        Approval rewrites the response type atomically with the review.

        Raises:
            ChangeRequestNotFoundError: No such request.
            ChangeRequestAlreadyReviewedError: The request is not PENDING.
            NSBResponseNotFoundError: The response has disappeared.
        """
        async with self._audit.track(
            reviewer_id,
            AuditAction.NSB_RESPONSE_CHANGE_REVIEW,
            _CHANGE_REQUEST,
            str(request_id),
            approve=approve,
        ):
            async with self._store.transaction() as uow:
                request = await uow.change_requests.get(request_id, for_update=True)
                if request is None:
                    raise ChangeRequestNotFoundError(request_id)

                now = self._time.now()
                reviewed = request.reviewed(approve, reviewer_id, comment, now)

                if approve:
                    response = await uow.nsb_responses.get(
                        request.response_id, for_update=True
                    )
                    if response is None:
                        raise NSBResponseNotFoundError(request.response_id)
                    await uow.nsb_responses.update(
                        response.with_response_type(request.requested_type, now)
                    )
                await uow.change_requests.update(reviewed)

        logger.info(
            "nsb_response_change_reviewed",
            request_id=str(request_id),
            status=reviewed.status.value,
            reviewer_id=reviewer_id,
        )
        return reviewed

    async def find_change_requests(
        self, response_id: UUID
    ) -> list[NSBResponseChangeRequest]:
        """Change requests on a response, oldest first."""
        async with self._store.transaction() as uow:
            return await uow.change_requests.list_by_response(response_id)
