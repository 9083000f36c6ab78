"""
Domain layer - Pure business logic for standards balloting.

This layer contains:
- Domain models (Balloting, Vote, NSBResponse, Acceptance, ...)
- Governance policies (acceptance criteria, quorum)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import GovernanceError

__all__: list[str] = ["GovernanceError"]
