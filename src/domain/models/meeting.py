"""Meeting participation facts used for quorum checks.

Only what a quorum decision needs is modelled here: who is eligible
(committee P-members) and who attended. Scheduling, agendas and minutes
belong to the surrounding application.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, eq=True)
class Meeting:
    """A committee meeting as seen by the quorum checker.

    Attributes:
        id: Unique identifier.
        committee_id: TC/SC/WG holding the meeting.
        eligible_member_ids: Members entitled to count toward quorum.
        attendee_ids: Members recorded as attending.
        project_id: Project under discussion, if any.
        has_quorum: Last recorded quorum result (None until checked).
        quorum_checked_at: When quorum was last checked.
    """

    id: UUID
    committee_id: str
    eligible_member_ids: frozenset[str] = field(default_factory=frozenset)
    attendee_ids: frozenset[str] = field(default_factory=frozenset)
    project_id: str | None = field(default=None)
    has_quorum: bool | None = field(default=None)
    quorum_checked_at: datetime | None = field(default=None)

    @property
    def participating_member_ids(self) -> frozenset[str]:
        """Attendees that count toward quorum (eligible members only)."""
        return self.attendee_ids & self.eligible_member_ids

    def with_attendee(self, member_id: str) -> Meeting:
        return replace(self, attendee_ids=self.attendee_ids | {member_id})

    def without_attendee(self, member_id: str) -> Meeting:
        return replace(self, attendee_ids=self.attendee_ids - {member_id})

    def with_quorum_result(self, has_quorum: bool, at: datetime) -> Meeting:
        return replace(self, has_quorum=has_quorum, quorum_checked_at=at)
