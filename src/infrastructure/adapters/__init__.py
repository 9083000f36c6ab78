"""Infrastructure adapters for the balloting core.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external services.
"""

from src.infrastructure.adapters.persistence import PostgresGovernanceStore
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority

__all__: list[str] = ["PostgresGovernanceStore", "SystemTimeAuthority"]
