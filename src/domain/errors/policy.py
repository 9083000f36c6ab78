"""Policy errors for quorum and acceptance thresholds.

Thresholds are external configuration. These errors are raised when the
configuration is missing or when the inputs make a policy decision
meaningless (no eligible members).
"""

from __future__ import annotations

from src.domain.exceptions import GovernanceError


class PolicyError(GovernanceError):
    """Base class for governance policy errors."""

    pass


class NoEligibleMembersError(PolicyError):
    """Raised when a quorum or acceptance check has zero eligible members.

    A vacuous "true" is never returned for an empty electorate.

    Attributes:
        subject: Description of what was being evaluated.
    """

    def __init__(self, subject: str) -> None:
        self.subject = subject
        super().__init__(f"No eligible members for {subject}")


class ThresholdNotConfiguredError(PolicyError):
    """Raised when a required threshold was neither passed nor configured.

    Attributes:
        threshold_name: Name of the missing threshold.
    """

    def __init__(self, threshold_name: str) -> None:
        self.threshold_name = threshold_name
        super().__init__(f"Threshold not configured: {threshold_name}")


class IneligibleVoterError(PolicyError):
    """Raised when a member outside the project's electorate tries to vote."""

    def __init__(self, member_id: str, project_id: str) -> None:
        self.member_id = member_id
        self.project_id = project_id
        super().__init__(
            f"Member {member_id} is not eligible to vote on project {project_id}"
        )
