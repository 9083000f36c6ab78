"""Balloting repository port.

Implementations persist Balloting records. ``get(..., for_update=True)``
must lock the row until the surrounding unit of work ends, so status
transitions and vote writes on the same balloting are serialized.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.balloting import Balloting


class BallotingRepositoryProtocol(Protocol):
    """Persistence contract for balloting rounds."""

    @abstractmethod
    async def add(self, balloting: Balloting) -> None:
        """Insert a new balloting."""
        ...

    @abstractmethod
    async def get(self, balloting_id: UUID, *, for_update: bool = False) -> Balloting | None:
        """Fetch a balloting by id, optionally locking it.

        Args:
            balloting_id: The balloting to fetch.
            for_update: Lock the row for the rest of the unit of work.

        Returns:
            The balloting, or None if it does not exist.
        """
        ...

    @abstractmethod
    async def update(self, balloting: Balloting) -> None:
        """Overwrite an existing balloting."""
        ...

    @abstractmethod
    async def delete(self, balloting_id: UUID) -> None:
        """Remove a balloting."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Balloting]:
        """All ballotings, newest first."""
        ...

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Balloting]:
        """Ballotings of a project, newest first."""
        ...

    @abstractmethod
    async def find_overlapping(
        self, range_start: datetime, range_end: datetime
    ) -> list[Balloting]:
        """Ballotings with ``start_date < range_end`` and ``end_date >= range_start``.

        Args:
            range_start: Inclusive start of the query range.
            range_end: Exclusive end of the query range.
        """
        ...
