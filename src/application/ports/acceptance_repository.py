"""Acceptance snapshot repository port.

Snapshots are never deleted. A decided snapshot is immutable:
``update`` only applies to rows whose stored decision is still PENDING and
raises ConcurrentModificationError otherwise.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.acceptance import Acceptance


class AcceptanceRepositoryProtocol(Protocol):
    """Persistence contract for acceptance snapshots."""

    @abstractmethod
    async def add(self, acceptance: Acceptance) -> None:
        """Insert a new snapshot version."""
        ...

    @abstractmethod
    async def get(self, acceptance_id: UUID, *, for_update: bool = False) -> Acceptance | None:
        ...

    @abstractmethod
    async def get_latest(
        self, project_id: str, *, for_update: bool = False
    ) -> Acceptance | None:
        """Highest version for a project, or None."""
        ...

    @abstractmethod
    async def update(self, acceptance: Acceptance) -> None:
        """Overwrite a PENDING snapshot.

        Raises:
            ConcurrentModificationError: The stored snapshot is already decided.
        """
        ...

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Acceptance]:
        """All versions for a project, oldest first."""
        ...
