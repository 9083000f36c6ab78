"""PostgreSQL persistence for the governance store."""

from src.infrastructure.adapters.persistence.postgres_governance_store import (
    PostgresGovernanceStore,
    PostgresUnitOfWork,
)

__all__: list[str] = ["PostgresGovernanceStore", "PostgresUnitOfWork"]
