"""FDARS recommendation repository port.

Writes are compare-and-swap on the recommendation version so that a
verification can never land on a recommendation that was replaced in the
meantime.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.domain.models.fdars_recommendation import FDARSRecommendation


class FDARSRecommendationRepositoryProtocol(Protocol):
    """Persistence contract for FDARS recommendations (one per project)."""

    @abstractmethod
    async def get(
        self, project_id: str, *, for_update: bool = False
    ) -> FDARSRecommendation | None:
        ...

    @abstractmethod
    async def save(
        self, recommendation: FDARSRecommendation, expected_version: int | None
    ) -> None:
        """Insert or compare-and-swap a recommendation.

        Args:
            recommendation: The new state.
            expected_version: Version currently stored, or None to insert.

        Raises:
            ConcurrentModificationError: The stored version differs from
                expected_version (or a row exists when inserting).
        """
        ...
