"""Final disposition of a closed balloting round."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.models.acceptance import AcceptanceCriteriaResult
from src.domain.models.balloting import Balloting
from src.domain.models.fdars_recommendation import FDARSRecommendation
from src.domain.models.quorum import QuorumResult
from src.domain.models.vote import VoteTally


class BallotingDisposition(Enum):
    """What happens to the proposal after the round closes.

    ACCEPT: quorum reached and acceptance criteria satisfied
    REJECT: quorum reached, criteria not satisfied
    REFER: quorum not reached; the proposal goes back to committee
    """

    ACCEPT = "ACCEPT"
    REJECT = "REJECT"
    REFER = "REFER"


@dataclass(frozen=True)
class BallotingOutcome:
    """Everything decided when a balloting closes.

    Attributes:
        balloting: The CLOSED balloting.
        tally: Votes committed before the status flip.
        quorum: Quorum evaluation over distinct voters.
        criteria: Acceptance criteria evaluation over the tally.
        disposition: ACCEPT, REJECT or REFER.
        fdars_recommendation: Current FDARS recommendation for the project.
    """

    balloting: Balloting
    tally: VoteTally
    quorum: QuorumResult
    criteria: AcceptanceCriteriaResult
    disposition: BallotingDisposition
    fdars_recommendation: FDARSRecommendation | None = None
