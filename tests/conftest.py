"""Pytest fixtures: an in-memory SQLite store with a fresh schema per test."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from dataclasses import dataclass
from typing import Dict

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.core import store
from taskboard.db import models  # noqa: F401
from taskboard.db.base import Base


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest_asyncio.fixture
async def org(db):
    return await store.create_organization(db, "Household", code="HOME01")


@dataclass
class ChoresBoard:
    board: models.Board
    todo: models.BoardColumn
    done: models.BoardColumn
    tasks: Dict[str, models.Task]


@pytest_asyncio.fixture
async def chores(db, org, user_id) -> ChoresBoard:
    """Board "Daily Chores": Todo holds T1 (done) and T2 (open), Done holds T3 (done)."""
    board = await store.create_board(db, "Daily Chores", org.id, user_id)
    todo = await store.create_column(db, board.id, "Todo")
    done = await store.create_column(db, board.id, "Done", color="#22c55e")

    t1 = await store.create_task(
        db, board.id, todo.id, user_id, title="T1", description="Dishes", importance_color="red"
    )
    t2 = await store.create_task(db, board.id, todo.id, user_id, title="T2", allowed_weekdays=[5, 6])
    t3 = await store.create_task(db, board.id, done.id, user_id, title="T3")

    await store.set_task_completed(db, t1.id, True, user_id)
    await store.set_task_completed(db, t3.id, True, user_id)

    return ChoresBoard(board=board, todo=todo, done=done, tasks={"T1": t1, "T2": t2, "T3": t3})
