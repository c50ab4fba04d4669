"""Tests for the analytics database engine and session factory."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings
from src.core import models
from src.core.database import Base, create_engine


class TestCreateEngine:
    """Test suite for create_engine."""

    async def test_pool_follows_settings(self, test_settings: Settings) -> None:
        engine, _ = create_engine(test_settings)
        try:
            assert engine.url.drivername == "postgresql+asyncpg"
            assert engine.url.database == "training_test"
            assert engine.pool.size() == test_settings.database_pool_size
        finally:
            await engine.dispose()

    async def test_sessions_are_read_only_configured(self, test_settings: Settings) -> None:
        engine, session_factory = create_engine(test_settings)
        try:
            session = session_factory()
            assert isinstance(session, AsyncSession)
            assert session.sync_session.autoflush is False
            assert session_factory.kw["expire_on_commit"] is False
            await session.close()
        finally:
            await engine.dispose()


def test_models_share_one_metadata() -> None:
    assert models.User.metadata is Base.metadata
    assert {"users", "user_processes", "organization_batches"} <= set(Base.metadata.tables)
