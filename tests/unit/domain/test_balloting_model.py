"""Unit tests for the Balloting model and its state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domain.errors import (
    InvalidPeriodError,
    InvalidStateTransitionError,
    NaiveDatetimeError,
    TerminalStateError,
)
from src.domain.models.balloting import END_OF_DAY, Balloting, BallotingStatus

START = datetime(2026, 3, 1, tzinfo=timezone.utc)
END = datetime(2026, 3, 10, tzinfo=timezone.utc)


def _balloting(status: BallotingStatus = BallotingStatus.DRAFT) -> Balloting:
    balloting = Balloting.create("PRJ-001", START, END, "tc-sec", START)
    if status is BallotingStatus.DRAFT:
        return balloting
    if status is BallotingStatus.CLOSED:
        balloting = balloting.with_status(BallotingStatus.OPEN, START)
    return balloting.with_status(status, START)


class TestCreate:
    def test_new_balloting_is_draft(self) -> None:
        balloting = _balloting()

        assert balloting.status == BallotingStatus.DRAFT
        assert balloting.created_by == "tc-sec"
        assert balloting.updated_at is None

    @pytest.mark.parametrize("end", [START, START - timedelta(days=1)])
    def test_end_must_be_after_start(self, end: datetime) -> None:
        with pytest.raises(InvalidPeriodError):
            Balloting.create("PRJ-001", START, end, "tc-sec", START)

    @pytest.mark.parametrize(
        ("start", "end", "field_name"),
        [
            (START.replace(tzinfo=None), END, "start_date"),
            (START, END.replace(tzinfo=None), "end_date"),
        ],
    )
    def test_naive_dates_rejected(
        self, start: datetime, end: datetime, field_name: str
    ) -> None:
        with pytest.raises(NaiveDatetimeError) as exc_info:
            Balloting.create("PRJ-001", start, end, "tc-sec", START)

        assert exc_info.value.field_name == field_name


class TestTransitions:
    @pytest.mark.parametrize(
        ("start", "target"),
        [
            (BallotingStatus.DRAFT, BallotingStatus.OPEN),
            (BallotingStatus.DRAFT, BallotingStatus.CANCELLED),
            (BallotingStatus.OPEN, BallotingStatus.CLOSED),
            (BallotingStatus.OPEN, BallotingStatus.CANCELLED),
        ],
    )
    def test_allowed(self, start: BallotingStatus, target: BallotingStatus) -> None:
        moved = _balloting(start).with_status(target, END)

        assert moved.status == target
        assert moved.updated_at == END

    @pytest.mark.parametrize(
        ("start", "target"),
        [
            (BallotingStatus.DRAFT, BallotingStatus.CLOSED),
            (BallotingStatus.OPEN, BallotingStatus.DRAFT),
            (BallotingStatus.CLOSED, BallotingStatus.OPEN),
            (BallotingStatus.CLOSED, BallotingStatus.CANCELLED),
            (BallotingStatus.CANCELLED, BallotingStatus.OPEN),
        ],
    )
    def test_forbidden(self, start: BallotingStatus, target: BallotingStatus) -> None:
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            _balloting(start).with_status(target, END)

        assert exc_info.value.from_status == start
        assert exc_info.value.to_status == target

    def test_terminal_statuses_have_no_transitions(self) -> None:
        assert BallotingStatus.CLOSED.is_terminal()
        assert BallotingStatus.CANCELLED.is_terminal()
        assert BallotingStatus.CLOSED.valid_transitions() == frozenset()
        assert not BallotingStatus.OPEN.is_terminal()

    def test_with_status_leaves_original_untouched(self) -> None:
        draft = _balloting()
        draft.with_status(BallotingStatus.OPEN, END)

        assert draft.status == BallotingStatus.DRAFT


class TestWithPeriod:
    def test_open_balloting_can_be_rescheduled(self) -> None:
        new_end = END + timedelta(days=5)
        moved = _balloting(BallotingStatus.OPEN).with_period(START, new_end, END)

        assert moved.end_date == new_end
        assert moved.status == BallotingStatus.OPEN

    @pytest.mark.parametrize(
        "status", [BallotingStatus.CLOSED, BallotingStatus.CANCELLED]
    )
    def test_terminal_balloting_cannot_be_rescheduled(
        self, status: BallotingStatus
    ) -> None:
        with pytest.raises(TerminalStateError):
            _balloting(status).with_period(START, END + timedelta(days=1), END)

    def test_reversed_period_rejected(self) -> None:
        with pytest.raises(InvalidPeriodError):
            _balloting().with_period(END, START, END)


class TestVotingWindow:
    def test_window_runs_to_end_of_last_day(self) -> None:
        balloting = _balloting(BallotingStatus.OPEN)

        assert balloting.voting_window == (START, END + END_OF_DAY)
        assert balloting.accepts_votes_at(START)
        assert balloting.accepts_votes_at(END + timedelta(hours=23, minutes=59))

    def test_window_is_half_open(self) -> None:
        balloting = _balloting(BallotingStatus.OPEN)

        assert not balloting.accepts_votes_at(START - timedelta(seconds=1))
        assert not balloting.accepts_votes_at(END + END_OF_DAY)


class TestIntersects:
    def test_range_ending_on_start_day_matches(self) -> None:
        balloting = Balloting.create(
            "PRJ-001", START + timedelta(hours=15), END, "tc-sec", START
        )

        assert balloting.intersects(START - timedelta(days=3), START)

    def test_range_after_end_does_not_match(self) -> None:
        assert not _balloting().intersects(
            END + timedelta(days=1), END + timedelta(days=2)
        )

    def test_range_touching_end_matches(self) -> None:
        assert _balloting().intersects(END, END + timedelta(days=2))
