"""Configuration module for the balloting core.

Available Configurations:
- GovernanceConfig: Acceptance criteria and quorum thresholds
"""

from src.config.governance_config import GovernanceConfig

__all__ = ["GovernanceConfig"]
