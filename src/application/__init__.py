"""
Application layer - Use cases and orchestration for the balloting core.

This layer contains:
- Application services (VoteLedger, BallotingSession, AcceptanceEvaluator,
  QuorumChecker, NSB response change review)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, bootstrap
"""
