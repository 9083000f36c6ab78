"""NSB response and change-request repository ports.

One response per (project_id, responder_id), and at most one PENDING
change request per response. Both constraints are enforced at write time.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.nsb_response import (
        NSBResponse,
        NSBResponseChangeRequest,
        NSBResponseType,
    )


class NSBResponseRepositoryProtocol(Protocol):
    """Persistence contract for NSB responses."""

    @abstractmethod
    async def add(self, response: NSBResponse) -> None:
        """Insert a response.

        Raises:
            DuplicateResponseError: The responder already responded on the project.
        """
        ...

    @abstractmethod
    async def get(self, response_id: UUID, *, for_update: bool = False) -> NSBResponse | None:
        ...

    @abstractmethod
    async def update(self, response: NSBResponse) -> None:
        ...

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[NSBResponse]:
        """Responses on a project, newest first."""
        ...

    @abstractmethod
    async def count_by_type(self, project_id: str) -> dict[NSBResponseType, int]:
        """Count responses grouped by type. Absent types may be omitted."""
        ...


class NSBResponseChangeRequestRepositoryProtocol(Protocol):
    """Persistence contract for response change requests."""

    @abstractmethod
    async def add(self, request: NSBResponseChangeRequest) -> None:
        """Insert a change request.

        Raises:
            DuplicateChangeRequestError: A PENDING request exists for the response.
        """
        ...

    @abstractmethod
    async def get(
        self, request_id: UUID, *, for_update: bool = False
    ) -> NSBResponseChangeRequest | None:
        ...

    @abstractmethod
    async def update(self, request: NSBResponseChangeRequest) -> None:
        ...

    @abstractmethod
    async def list_by_response(self, response_id: UUID) -> list[NSBResponseChangeRequest]:
        """Change requests for a response, oldest first."""
        ...
