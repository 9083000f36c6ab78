"""Domain services for balloting governance.

Domain services hold business rules that don't naturally belong to a
single model. They must NOT depend on infrastructure.

Available services:
- evaluate_acceptance: Acceptance criteria policy
- evaluate_quorum / required_participants: Quorum policy
"""

from src.domain.services.acceptance_policy import evaluate_acceptance
from src.domain.services.quorum_policy import evaluate_quorum, required_participants

__all__ = [
    "evaluate_acceptance",
    "evaluate_quorum",
    "required_participants",
]
