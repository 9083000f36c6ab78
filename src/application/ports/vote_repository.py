"""Vote repository port.

The (balloting_id, member_id) pair is unique. Implementations enforce it
at write time and raise DuplicateVoteError on conflict; callers never
pre-check.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.vote import Vote


class VoteRepositoryProtocol(Protocol):
    """Persistence contract for votes."""

    @abstractmethod
    async def add(self, vote: Vote) -> None:
        """Insert a vote.

        Raises:
            DuplicateVoteError: The member already voted in this balloting.
        """
        ...

    @abstractmethod
    async def get(self, vote_id: UUID) -> Vote | None:
        ...

    @abstractmethod
    async def update(self, vote: Vote) -> None:
        """Persist a revised choice/comment. Identity fields are not rewritten."""
        ...

    @abstractmethod
    async def delete(self, vote_id: UUID) -> None:
        ...

    @abstractmethod
    async def list_by_balloting(self, balloting_id: UUID) -> list[Vote]:
        ...

    @abstractmethod
    async def list_by_member(self, member_id: str) -> list[Vote]:
        ...

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Vote]:
        ...

    @abstractmethod
    async def count_by_balloting(self, balloting_id: UUID) -> int:
        ...
