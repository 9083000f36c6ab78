"""In-memory stub for MemberEligibilityProtocol.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

from collections.abc import Iterable


class MemberEligibilityStub:
    """Configurable electorate per project.

    Projects without an explicit electorate fall back to ``default``.
    """

    def __init__(self, default: Iterable[str] = ()) -> None:
        self._default = frozenset(default)
        self._by_project: dict[str, frozenset[str]] = {}

    def set_eligible(self, project_id: str, member_ids: Iterable[str]) -> None:
        self._by_project[project_id] = frozenset(member_ids)

    async def eligible_member_ids(self, project_id: str) -> frozenset[str]:
        return self._by_project.get(project_id, self._default)
