"""Meeting repository port (participation facts only)."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.meeting import Meeting


class MeetingRepositoryProtocol(Protocol):
    """Persistence contract for meeting participation."""

    @abstractmethod
    async def add(self, meeting: Meeting) -> None:
        ...

    @abstractmethod
    async def get(self, meeting_id: UUID, *, for_update: bool = False) -> Meeting | None:
        ...

    @abstractmethod
    async def update(self, meeting: Meeting) -> None:
        ...
