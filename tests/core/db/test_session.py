from __future__ import annotations

import logging

import pytest
from fastapi import HTTPException
from sqlalchemy import text

from declarative_find.core.db import dispose_engine, get_session, init_engine, session_scope


@pytest.fixture
def engine(database_url):
    return init_engine(database_url)


async def _count_users() -> int:
    async with session_scope() as session:
        return (await session.execute(text("SELECT COUNT(*) FROM users"))).scalar()


@pytest.mark.asyncio
async def test_get_session_commits(engine) -> None:
    dependency = get_session()
    session = await dependency.__anext__()
    await session.execute(text("UPDATE users SET name = 'Augusta' WHERE id = 1"))
    with pytest.raises(StopAsyncIteration):
        await dependency.__anext__()

    async with session_scope() as session:
        name = (await session.execute(text("SELECT name FROM users WHERE id = 1"))).scalar()
    assert name == "Augusta"
    await dispose_engine()


@pytest.mark.asyncio
async def test_get_session_http_exception_rolls_back_quietly(engine, caplog) -> None:
    dependency = get_session()
    session = await dependency.__anext__()
    await session.execute(text("DELETE FROM users"))

    with caplog.at_level(logging.ERROR, logger="declarative_find.core.db"):
        with pytest.raises(HTTPException):
            await dependency.athrow(HTTPException(status_code=404))

    assert "rolled back" not in caplog.text
    assert await _count_users() == 2
    await dispose_engine()


@pytest.mark.asyncio
async def test_get_session_error_rolls_back_and_logs(engine, caplog) -> None:
    dependency = get_session()
    session = await dependency.__anext__()
    await session.execute(text("DELETE FROM users"))

    with caplog.at_level(logging.ERROR, logger="declarative_find.core.db"):
        with pytest.raises(RuntimeError):
            await dependency.athrow(RuntimeError("boom"))

    assert "DB transaction rolled back" in caplog.text
    assert await _count_users() == 2
    await dispose_engine()
