# declarative_find/core/db.py
from __future__ import annotations
from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator
from fastapi import HTTPException
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from declarative_find.core.config import settings

# Naming convention is strongly recommended for Alembic compatibility
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def init_engine(database_url: str | None = None) -> AsyncEngine:
    """(Re)create the process-wide async engine.

    SQLite URLs get a ``NullPool`` so connections never outlive the event
    loop that opened them.
    """
    global _engine, _sessionmaker
    url = database_url or settings.database_url

    if url.startswith("sqlite"):
        engine = create_async_engine(url, poolclass=NullPool, future=True)
    else:
        engine = create_async_engine(
            url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_pre_ping=True,
            future=True,
        )

    logger.info("Created async DB engine (%s)", engine.url.render_as_string())
    _engine = engine
    _sessionmaker = None
    return engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        return init_engine()
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    global _sessionmaker
    if _sessionmaker is None:
        _sessionmaker = async_sessionmaker(
            get_engine(),
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )
    return _sessionmaker


async def dispose_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        logger.info("Disposing async DB engine")
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for one unit of work: commit on success, roll back on error.

    ``HTTPException`` (e.g. a 404 from a finder hook) is an expected way
    for a request to end, so it rolls back without an error log.
    """
    Session = get_sessionmaker()
    async with Session() as session:
        try:
            yield session
            await session.commit()
        except HTTPException:
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            logger.exception("DB transaction rolled back")
            raise


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one ``session_scope`` per request. Use as ``Depends(get_session)``."""
    async with session_scope() as session:
        yield session


class Base(DeclarativeBase):
    """
    Default declarative base for models looked up by ``find``.

    Applications may bring their own base and pass it to
    ``ControllerDescriptor(model_base=...)``.
    """

    metadata = MetaData(
        schema=settings.database_schema,
        naming_convention=NAMING_CONVENTION,
    )
