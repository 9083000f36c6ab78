"""Apply migrations/ SQL files through an AsyncSession.

asyncpg runs one statement per execute, so a migration file is split on
statement terminators first. Migrations here use no dollar-quoted bodies.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


def split_statements(sql: str) -> list[str]:
    """Split SQL on ';', dropping ``--`` comment lines and empty chunks."""
    code = "\n".join(
        line for line in sql.splitlines() if not line.lstrip().startswith("--")
    )
    return [chunk.strip() for chunk in code.split(";") if chunk.strip()]


async def execute_sql_file(db_session: AsyncSession, path: Path) -> None:
    for statement in split_statements(path.read_text(encoding="utf-8")):
        await db_session.execute(text(statement))
