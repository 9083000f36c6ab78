"""In-memory stub for AuditTrailEmitterProtocol.

Collects entries for inspection. Can be told to fail so tests can prove
that emitter failures never affect the audited operation.

WARNING: This stub is NOT for production use.
"""

from __future__ import annotations

from src.domain.models.audit_trail import AuditAction, AuditOutcome, AuditTrailEntry


class AuditTrailEmitterStub:
    """Collecting stub implementation of AuditTrailEmitterProtocol."""

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        """Initialize the stub.

        Args:
            fail_with: If set, every record() raises this exception and
                stores nothing.
        """
        self.entries: list[AuditTrailEntry] = []
        self._fail_with = fail_with

    async def record(self, entry: AuditTrailEntry) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.entries.append(entry)

    def set_failure(self, error: Exception | None) -> None:
        self._fail_with = error

    def entries_for(
        self, action: AuditAction, outcome: AuditOutcome | None = None
    ) -> list[AuditTrailEntry]:
        return [
            e
            for e in self.entries
            if e.action == action and (outcome is None or e.outcome == outcome)
        ]

    def clear(self) -> None:
        self.entries.clear()
