"""Database access for the headcount analytics service.

The platform's CRUD layer owns and migrates these tables. This service maps
the columns it reads and opens short-lived sessions that only ever SELECT:
one per single-process request, and one per process inside a rollup so
pipelines can query concurrently.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.core.config import Settings

SessionFactory = async_sessionmaker[AsyncSession]


class Base(DeclarativeBase):
    """Declarative base for the platform tables the analytics engine reads."""


def create_engine(settings: Settings) -> tuple[AsyncEngine, SessionFactory]:
    """Open the PostgreSQL pool and a factory of read-only analytics sessions.

    The pool is sized for ``analytics_max_concurrency`` rollup pipelines
    plus request traffic (``database_pool_size`` + ``database_max_overflow``).
    Nothing is committed through these sessions, so objects never need
    expiring after a commit and autoflush has nothing to write.
    """
    engine = create_async_engine(
        settings.database_url or "",
        echo=settings.debug,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )
    return engine, async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
