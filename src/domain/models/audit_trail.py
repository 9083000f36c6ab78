"""Audit trail entries handed to the external audit emitter.

Action names follow the audit vocabulary of the surrounding standards
platform so that entries from this core line up with the rest of its
audit log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuditAction(Enum):
    """Auditable actions performed by the balloting core."""

    BALLOT_CREATE = "BALLOT_CREATE"
    BALLOT_UPDATE = "BALLOT_UPDATE"
    BALLOT_OPEN = "BALLOT_OPEN"
    BALLOT_CLOSE = "BALLOT_CLOSE"
    BALLOT_CANCEL = "BALLOT_CANCEL"
    BALLOT_DELETE = "BALLOT_DELETE"
    VOTE_SUBMIT = "VOTE_SUBMIT"
    VOTE_UPDATE = "VOTE_UPDATE"
    VOTE_DELETE = "VOTE_DELETE"
    FDARS_RECOMMEND = "FDARS_RECOMMEND"
    FDARS_VERIFY = "FDARS_VERIFY"
    NSB_RESPONSE_SUBMIT = "NSB_RESPONSE_SUBMIT"
    NSB_RESPONSE_CHANGE_REQUEST = "NSB_RESPONSE_CHANGE_REQUEST"
    NSB_RESPONSE_CHANGE_REVIEW = "NSB_RESPONSE_CHANGE_REVIEW"
    ACCEPTANCE_STATS = "ACCEPTANCE_STATS"
    ACCEPTANCE_DECISION = "ACCEPTANCE_DECISION"
    MEETING_ATTENDANCE = "MEETING_ATTENDANCE"
    MEETING_QUORUM_CHECK = "MEETING_QUORUM_CHECK"


class AuditOutcome(Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass(frozen=True)
class AuditTrailEntry:
    """A structured audit record.

    Attributes:
        actor_id: Who performed the action.
        action: What was done.
        resource_type: Kind of record acted on (e.g. "balloting").
        resource_id: Identifier of that record.
        outcome: SUCCESS or FAILURE.
        timestamp: When the action finished (UTC).
        metadata: Extra context; failures carry ``error`` and ``error_type``.
    """

    actor_id: str
    action: AuditAction
    resource_type: str
    resource_id: str
    outcome: AuditOutcome
    timestamp: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
