"""FDARS recommendation model (Final Draft African Regional Standard).

Two-step workflow: a recommender proposes, a verifier confirms. Every
(re-)recommendation bumps the version and clears verification, so a
verification always applies to the recommendation the verifier read.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from src.domain.errors.conflict import AlreadyVerifiedError


@dataclass(frozen=True, eq=True)
class FDARSRecommendation:
    """FDARS recommendation for a project, keyed by project id.

    Attributes:
        project_id: The project recommended for FDARS.
        recommended: Whether the project is recommended.
        recommended_by: Member who made the current recommendation.
        recommended_at: When the current recommendation was made.
        version: Incremented on every re-recommendation.
        verified: Whether the current recommendation was verified.
        verified_by: Verifier of the current recommendation.
        verified_at: Verification timestamp.
    """

    project_id: str
    recommended: bool
    recommended_by: str
    recommended_at: datetime
    version: int = field(default=1)
    verified: bool = field(default=False)
    verified_by: str | None = field(default=None)
    verified_at: datetime | None = field(default=None)

    def rerecommended(
        self, recommended: bool, recommended_by: str, at: datetime
    ) -> FDARSRecommendation:
        """Replace the recommendation; any earlier verification no longer applies."""
        return FDARSRecommendation(
            project_id=self.project_id,
            recommended=recommended,
            recommended_by=recommended_by,
            recommended_at=at,
            version=self.version + 1,
        )

    def verified_as(self, verified_by: str, at: datetime) -> FDARSRecommendation:
        """Return the verified copy.

        The verifier is not required to differ from the recommender.

        Raises:
            AlreadyVerifiedError: If this version is already verified.
        """
        if self.verified:
            raise AlreadyVerifiedError(self.project_id, self.verified_by)
        return replace(self, verified=True, verified_by=verified_by, verified_at=at)
