"""Audit trail recording for governance operations.

Wraps the external AuditTrailEmitterProtocol so services can audit an
operation with a single ``async with`` block. Successful operations and
rejected ones are both recorded; the entry is emitted after the wrapped
block (and therefore its unit of work) has finished. Emitter failures are
logged and dropped so they can never roll back or fail the operation.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from structlog import get_logger

from src.domain.exceptions import GovernanceError
from src.domain.models.audit_trail import AuditAction, AuditOutcome, AuditTrailEntry

if TYPE_CHECKING:
    from src.application.ports.audit_trail_emitter import AuditTrailEmitterProtocol
    from src.application.ports.time_authority import TimeAuthorityProtocol

logger = get_logger(__name__)


@dataclass
class AuditScope:
    """Mutable context filled in while an audited operation runs.

    Attributes:
        resource_id: Identifier of the record acted on; may be set once it
            is known (e.g. after creation).
        metadata: Extra context recorded with the entry.
    """

    resource_id: str
    metadata: dict[str, Any] = field(default_factory=dict)


class AuditTrailRecorder:
    """Records audit entries for governance operations.

    Example:
        >>> recorder = AuditTrailRecorder(emitter, time_authority)
        >>> async with recorder.track("member-1", AuditAction.VOTE_SUBMIT, "vote") as scope:
        ...     vote = await do_the_work()
        ...     scope.resource_id = str(vote.id)
    """

    def __init__(
        self,
        emitter: AuditTrailEmitterProtocol | None,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the recorder.

        Args:
            emitter: External audit emitter. If None, nothing is emitted.
            time_authority: Clock for entry timestamps.
        """
        self._emitter = emitter
        self._time = time_authority

    async def record(
        self,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        outcome: AuditOutcome,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Emit one entry; never raises."""
        if self._emitter is None:
            return
        entry = AuditTrailEntry(
            actor_id=actor_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            outcome=outcome,
            timestamp=self._time.now(),
            metadata=dict(metadata or {}),
        )
        try:
            await self._emitter.record(entry)
        except Exception as exc:  # noqa: BLE001 - emission is fire-and-forget
            logger.warning(
                "audit_emission_failed",
                action=action.value,
                resource_type=resource_type,
                resource_id=resource_id,
                error=str(exc),
            )

    @asynccontextmanager
    async def track(
        self,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str = "",
        **metadata: Any,
    ) -> AsyncIterator[AuditScope]:
        """Audit the wrapped block.

        Records SUCCESS when the block completes and FAILURE (with the error
        type and message) when it raises; the exception is re-raised
        unchanged.

        Args:
            actor_id: Who performs the operation.
            action: The audited action.
            resource_type: Kind of record acted on.
            resource_id: Identifier, if already known.
            **metadata: Initial metadata.

        Yields:
            AuditScope that the block may update.
        """
        scope = AuditScope(resource_id=resource_id, metadata=dict(metadata))
        try:
            yield scope
        except Exception as exc:
            if isinstance(exc, GovernanceError):
                logger.warning(
                    "governance_operation_rejected",
                    action=action.value,
                    actor_id=actor_id,
                    resource_id=scope.resource_id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
            else:
                logger.error(
                    "governance_operation_failed",
                    action=action.value,
                    actor_id=actor_id,
                    resource_id=scope.resource_id,
                    error_type=type(exc).__name__,
                )
            await self.record(
                actor_id,
                action,
                resource_type,
                scope.resource_id,
                AuditOutcome.FAILURE,
                {**scope.metadata, "error": str(exc), "error_type": type(exc).__name__},
            )
            raise
        await self.record(
            actor_id,
            action,
            resource_type,
            scope.resource_id,
            AuditOutcome.SUCCESS,
            scope.metadata,
        )
