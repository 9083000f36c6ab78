"""Unit tests for Vote, VoteChoice and VoteTally."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.domain.errors import InvalidChoiceError
from src.domain.models.vote import Vote, VoteChoice, VoteTally

NOW = datetime(2026, 3, 2, 12, tzinfo=timezone.utc)


class TestVoteChoiceParse:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("APPROVE", VoteChoice.APPROVE),
            ("disapprove", VoteChoice.DISAPPROVE),
            ("  Abstain ", VoteChoice.ABSTAIN),
            (VoteChoice.APPROVE, VoteChoice.APPROVE),
        ],
    )
    def test_accepts_known_values(self, raw: object, expected: VoteChoice) -> None:
        assert VoteChoice.parse(raw) == expected  # type: ignore[arg-type]

    @pytest.mark.parametrize("raw", ["YES", "", None, 1])
    def test_rejects_unknown_values(self, raw: object) -> None:
        with pytest.raises(InvalidChoiceError) as exc_info:
            VoteChoice.parse(raw)  # type: ignore[arg-type]

        assert exc_info.value.choice == raw


class TestVoteRevise:
    def test_revise_keeps_identity_fields(self) -> None:
        vote = Vote.cast(uuid4(), "PRJ-001", "member-01", VoteChoice.APPROVE, "", NOW)
        later = NOW + timedelta(hours=1)

        revised = vote.revise(VoteChoice.DISAPPROVE, "changed my mind", later)

        assert revised.id == vote.id
        assert revised.member_id == vote.member_id
        assert revised.balloting_id == vote.balloting_id
        assert revised.cast_at == NOW
        assert revised.choice == VoteChoice.DISAPPROVE
        assert revised.comment == "changed my mind"
        assert revised.updated_at == later


class TestVoteTally:
    def test_from_votes_counts_each_choice(self) -> None:
        balloting_id = uuid4()
        choices = [VoteChoice.APPROVE] * 3 + [VoteChoice.DISAPPROVE, VoteChoice.ABSTAIN]
        votes = [
            Vote.cast(balloting_id, "PRJ-001", f"m-{i}", choice, "", NOW)
            for i, choice in enumerate(choices)
        ]

        tally = VoteTally.from_votes(balloting_id, votes)

        assert (tally.approve, tally.disapprove, tally.abstain) == (3, 1, 1)
        assert tally.total == 5
        assert len(tally.distinct_voters) == 5

    def test_empty_tally_is_all_zero(self) -> None:
        tally = VoteTally.from_votes(uuid4(), [])

        assert tally.total == 0
        assert tally.distinct_voters == frozenset()

    def test_components_must_sum_to_total(self) -> None:
        with pytest.raises(ValueError, match="do not sum"):
            VoteTally(balloting_id=uuid4(), approve=1, disapprove=1, abstain=0, total=3)
