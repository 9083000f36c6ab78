"""Unit tests for the database bootstrap."""

import pytest

from src.bootstrap.database import (
    close_database_engine,
    get_database_url,
    get_session_factory,
    reset_database_bootstrap,
)
from src.bootstrap.governance import get_governance_store
from src.infrastructure.adapters.persistence import PostgresGovernanceStore


@pytest.mark.parametrize(
    ("configured", "expected"),
    [
        ("postgresql://u:p@db:5432/ballots", "postgresql+asyncpg://u:p@db:5432/ballots"),
        ("postgres://u:p@db/ballots", "postgresql+asyncpg://u:p@db/ballots"),
        ("u:p@db/ballots", "postgresql+asyncpg://u:p@db/ballots"),
        (
            "postgresql+asyncpg://u:p@db/ballots",
            "postgresql+asyncpg://u:p@db/ballots",
        ),
    ],
)
def test_normalizes_to_asyncpg(
    monkeypatch: pytest.MonkeyPatch, configured: str, expected: str
) -> None:
    monkeypatch.setenv("DATABASE_URL", configured)

    assert get_database_url() == expected


def test_missing_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError, match="DATABASE_URL"):
        get_database_url()


class TestSessionFactory:
    @pytest.fixture(autouse=True)
    def _database_url(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/ballots")
        reset_database_bootstrap()
        yield
        reset_database_bootstrap()

    def test_factory_is_created_once(self) -> None:
        factory = get_session_factory()

        assert get_session_factory() is factory

    def test_reset_creates_new_factory(self) -> None:
        factory = get_session_factory()

        reset_database_bootstrap()

        assert get_session_factory() is not factory

    def test_invalid_pool_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_POOL_SIZE", "lots")

        with pytest.raises(ValueError, match="DATABASE_POOL_SIZE"):
            get_session_factory()

    @pytest.mark.asyncio
    async def test_close_without_engine_is_noop(self) -> None:
        await close_database_engine()

    def test_governance_store_uses_postgres(self) -> None:
        assert isinstance(get_governance_store(), PostgresGovernanceStore)
