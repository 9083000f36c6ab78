"""Unit tests for GovernanceConfig.

Thresholds have no defaults: an unset variable leaves the policy
unconfigured rather than falling back to a guessed value.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from src.config.governance_config import GovernanceConfig

_VARS = (
    "ACCEPTANCE_THRESHOLD_FRACTION",
    "ACCEPTANCE_MAX_DISAPPROVALS",
    "QUORUM_REQUIRED_FRACTION",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)


class TestFromEnvironment:
    def test_nothing_configured(self) -> None:
        config = GovernanceConfig.from_environment()

        assert config.acceptance_criteria is None
        assert config.quorum is None

    def test_all_configured(self) -> None:
        env = {
            "ACCEPTANCE_THRESHOLD_FRACTION": "0.7",
            "ACCEPTANCE_MAX_DISAPPROVALS": "2",
            "QUORUM_REQUIRED_FRACTION": "0.5",
        }
        with patch.dict(os.environ, env):
            config = GovernanceConfig.from_environment()

        assert config.acceptance_criteria is not None
        assert config.acceptance_criteria.threshold_fraction == 0.7
        assert config.acceptance_criteria.max_disapprovals == 2
        assert config.quorum is not None
        assert config.quorum.required_fraction == 0.5

    def test_quorum_only(self) -> None:
        with patch.dict(os.environ, {"QUORUM_REQUIRED_FRACTION": "0.6"}):
            config = GovernanceConfig.from_environment()

        assert config.acceptance_criteria is None
        assert config.quorum is not None

    def test_acceptance_variables_must_be_set_together(self) -> None:
        with patch.dict(os.environ, {"ACCEPTANCE_THRESHOLD_FRACTION": "0.7"}):
            with pytest.raises(ValueError, match="must be set together"):
                GovernanceConfig.from_environment()

    def test_blank_values_count_as_unset(self) -> None:
        with patch.dict(os.environ, {"QUORUM_REQUIRED_FRACTION": "  "}):
            assert GovernanceConfig.from_environment().quorum is None

    @pytest.mark.parametrize(
        ("var", "value"),
        [
            ("QUORUM_REQUIRED_FRACTION", "half"),
            ("QUORUM_REQUIRED_FRACTION", "1.5"),
            ("ACCEPTANCE_MAX_DISAPPROVALS", "two"),
        ],
    )
    def test_malformed_values_rejected(self, var: str, value: str) -> None:
        env = {
            "ACCEPTANCE_THRESHOLD_FRACTION": "0.7",
            "ACCEPTANCE_MAX_DISAPPROVALS": "2",
            var: value,
        }
        with patch.dict(os.environ, env):
            with pytest.raises(ValueError):
                GovernanceConfig.from_environment()
