"""Unit tests for NSBResponseChangeService."""

import asyncio
from uuid import uuid4

import pytest

from src.domain.errors import (
    ChangeRequestAlreadyReviewedError,
    ChangeRequestNotFoundError,
    DuplicateChangeRequestError,
    NSBResponseNotFoundError,
    ResponderMismatchError,
)
from src.domain.models.audit_trail import AuditAction, AuditOutcome
from src.domain.models.nsb_response import (
    ChangeRequestStatus,
    NSBResponse,
    NSBResponseChangeRequest,
    NSBResponseType,
)
from tests.helpers import BallotingHarness
from tests.helpers.harness import PROJECT_ID, TC_SECRETARY


@pytest.fixture
async def response(harness: BallotingHarness) -> NSBResponse:
    return await harness.evaluator.record_nsb_response(
        PROJECT_ID, "nsb-ke", "DISAPPROVE", "", actor_id="nsb-ke"
    )


class TestRequestChange:
    @pytest.mark.asyncio
    async def test_responder_can_request_change(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        request = await harness.changes.request_change(
            response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
        )

        assert request.status == ChangeRequestStatus.PENDING
        assert request.requested_type == NSBResponseType.APPROVE_WITH_COMMENT
        assert await harness.changes.find_change_requests(response.id) == [request]

    @pytest.mark.asyncio
    async def test_other_member_cannot_request_change(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        with pytest.raises(ResponderMismatchError):
            await harness.changes.request_change(
                response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-tz"
            )

    @pytest.mark.asyncio
    async def test_unknown_response(self, harness: BallotingHarness) -> None:
        with pytest.raises(NSBResponseNotFoundError):
            await harness.changes.request_change(
                uuid4(), "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
            )

    @pytest.mark.asyncio
    async def test_one_pending_request_per_response(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        results = await asyncio.gather(
            harness.changes.request_change(response.id, "APPROVE_NO_COMMENT", actor_id="nsb-ke"),
            harness.changes.request_change(response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"),
            return_exceptions=True,
        )

        assert sum(isinstance(r, NSBResponseChangeRequest) for r in results) == 1
        assert sum(isinstance(r, DuplicateChangeRequestError) for r in results) == 1

    @pytest.mark.asyncio
    async def test_new_request_allowed_after_review(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        first = await harness.changes.request_change(
            response.id, "APPROVE_NO_COMMENT", actor_id="nsb-ke"
        )
        await harness.changes.review_change(first.id, approve=False, reviewer_id=TC_SECRETARY)

        second = await harness.changes.request_change(
            response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
        )

        assert second.is_pending
        assert len(await harness.changes.find_change_requests(response.id)) == 2


class TestReviewChange:
    @pytest.mark.asyncio
    async def test_approval_rewrites_response(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        request = await harness.changes.request_change(
            response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
        )

        reviewed = await harness.changes.review_change(
            request.id, approve=True, reviewer_id=TC_SECRETARY, comment="agreed"
        )

        assert reviewed.status == ChangeRequestStatus.APPROVED
        assert reviewed.reviewed_by == TC_SECRETARY
        [stored] = await harness.evaluator.get_responses(PROJECT_ID)
        assert stored.response_type == NSBResponseType.APPROVE_WITH_COMMENT
        assert stored.updated_at == harness.clock.now()

    @pytest.mark.asyncio
    async def test_rejection_leaves_response_unchanged(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        request = await harness.changes.request_change(
            response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
        )

        reviewed = await harness.changes.review_change(
            request.id, approve=False, reviewer_id=TC_SECRETARY
        )

        assert reviewed.status == ChangeRequestStatus.REJECTED
        [stored] = await harness.evaluator.get_responses(PROJECT_ID)
        assert stored.response_type == NSBResponseType.DISAPPROVE

    @pytest.mark.asyncio
    async def test_second_review_rejected(
        self, harness: BallotingHarness, response: NSBResponse
    ) -> None:
        request = await harness.changes.request_change(
            response.id, "APPROVE_WITH_COMMENT", actor_id="nsb-ke"
        )
        await harness.changes.review_change(request.id, approve=False, reviewer_id=TC_SECRETARY)

        with pytest.raises(ChangeRequestAlreadyReviewedError):
            await harness.changes.review_change(
                request.id, approve=True, reviewer_id=TC_SECRETARY
            )

        [stored] = await harness.evaluator.get_responses(PROJECT_ID)
        assert stored.response_type == NSBResponseType.DISAPPROVE

    @pytest.mark.asyncio
    async def test_unknown_request(self, harness: BallotingHarness) -> None:
        with pytest.raises(ChangeRequestNotFoundError):
            await harness.changes.review_change(
                uuid4(), approve=True, reviewer_id=TC_SECRETARY
            )

        [failure] = harness.emitter.entries_for(
            AuditAction.NSB_RESPONSE_CHANGE_REVIEW, AuditOutcome.FAILURE
        )
        assert failure.actor_id == TC_SECRETARY
