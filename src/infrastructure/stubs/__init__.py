"""Infrastructure stubs for development and testing.

This module provides stub implementations of infrastructure ports
for use in development and testing environments.

Available stubs:
- InMemoryGovernanceStore: Serializable in-memory store with staged commits
  and the same uniqueness rules as the PostgreSQL schema
- AuditTrailEmitterStub: Collects audit entries, can be made to fail
- MemberEligibilityStub: Configurable electorate per project

WARNING: These stubs are NOT for production use.
Production implementations are in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.audit_trail_emitter_stub import AuditTrailEmitterStub
from src.infrastructure.stubs.governance_store_stub import (
    InMemoryGovernanceStore,
    InMemoryUnitOfWork,
)
from src.infrastructure.stubs.member_eligibility_stub import MemberEligibilityStub

__all__: list[str] = [
    "AuditTrailEmitterStub",
    "InMemoryGovernanceStore",
    "InMemoryUnitOfWork",
    "MemberEligibilityStub",
]
