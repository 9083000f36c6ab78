"""Audit trail emitter port.

The audit log is owned outside this core. Emission is fire-and-forget:
callers record entries after their unit of work has finished, and a
failing emitter must never undo or fail the primary operation.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.domain.models.audit_trail import AuditTrailEntry


class AuditTrailEmitterProtocol(Protocol):
    """Receives structured audit entries."""

    @abstractmethod
    async def record(self, entry: AuditTrailEntry) -> None:
        """Record one audit entry.

        Args:
            entry: Actor, action, resource, outcome and timestamp.
        """
        ...
