"""
Balloting Core - standards balloting, voting and acceptance

Governance core for a regional standards body: balloting rounds on
standards projects, member votes, NSB responses with versioned acceptance
decisions, quorum checks and the FDARS recommend/verify workflow.

Invariants:
- One vote per member per balloting, one response per NSB per project
- Votes change only while their balloting is OPEN
- Decided acceptance snapshots are never rewritten
- Thresholds come from configuration, never from built-in defaults
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
