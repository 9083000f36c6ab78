"""
Shared fixtures for balloting core tests.

Unit tests under tests/unit/ run against the in-memory store and a pinned
clock; tests under tests/integration/ need Docker and are marked
``integration`` (deselected unless ``-m integration`` is passed).
"""

import pytest

from src.bootstrap.database import reset_database_bootstrap
from src.bootstrap.governance import reset_governance_dependencies
from tests.helpers import BallotingHarness, FakeTimeAuthority


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    return FakeTimeAuthority()


@pytest.fixture
def harness() -> BallotingHarness:
    """Services over a fresh in-memory store with default thresholds."""
    return BallotingHarness()


@pytest.fixture(autouse=True)
def _reset_bootstrap_singletons():
    """Keep bootstrap singletons from leaking between tests."""
    yield
    reset_governance_dependencies()
    reset_database_bootstrap()
