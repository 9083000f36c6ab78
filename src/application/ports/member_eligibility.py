"""Member eligibility port.

Which members may vote or respond on a project is decided by the user and
role management layer (committee membership, NSB participation). The core
only asks for the resulting set.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class MemberEligibilityProtocol(Protocol):
    """Source of the eligible electorate for a project."""

    @abstractmethod
    async def eligible_member_ids(self, project_id: str) -> frozenset[str]:
        """Members eligible to vote/respond on a project.

        Returns:
            Frozenset of member ids; empty when nobody is eligible.
        """
        ...
