"""
Infrastructure layer - External adapters for the balloting core.

This layer contains:
- PostgreSQL governance store (SQLAlchemy async + asyncpg)
- System time authority
- In-memory stubs for tests and development
- Structured logging and correlation

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""
