"""Shared test helpers.

Helpers:
    FakeTimeAuthority: Frozen, manually advanced clock
    BallotingHarness: Services wired to in-memory stubs

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import DEFAULT_TEST_TIME, FakeTimeAuthority
from tests.helpers.harness import BallotingHarness

__all__ = ["BallotingHarness", "DEFAULT_TEST_TIME", "FakeTimeAuthority"]
