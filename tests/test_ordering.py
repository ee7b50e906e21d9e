"""
Tests for task ordering within a column: strategy selection, appending,
normalization and adjacent swaps.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from taskboard.core import ordering, store
from taskboard.core.errors import NotFound
from taskboard.db.models import Task

T0 = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)


def make_task(title, position=None, minutes=0):
    return Task(
        id=uuid.uuid4(),
        title=title,
        position=position,
        created_at=T0 + timedelta(minutes=minutes),
    )


def titles(tasks):
    return [t.title for t in tasks]


def test_positions_win_and_missing_positions_sort_last():
    a = make_task("A", position=2, minutes=0)
    b = make_task("B", position=None, minutes=1)
    c = make_task("C", position=1, minutes=2)

    assert titles(ordering.resolve_order([a, b, c])) == ["C", "A", "B"]
    assert ordering.strategy_for([a, b, c]) is ordering.POSITION_ORDERED


def test_legacy_column_orders_by_creation_time():
    first = make_task("first", minutes=0)
    second = make_task("second", minutes=5)
    third = make_task("third", minutes=10)

    assert titles(ordering.resolve_order([third, first, second])) == ["first", "second", "third"]
    assert ordering.strategy_for([first]) is ordering.CREATION_ORDERED


def test_equal_positions_fall_back_to_creation_time():
    late = make_task("late", position=0, minutes=9)
    early = make_task("early", position=0, minutes=1)

    assert titles(ordering.resolve_order([late, early])) == ["early", "late"]


def test_naive_and_aware_timestamps_sort_together():
    aware = make_task("aware", minutes=5)
    naive = make_task("naive")
    naive.created_at = (T0 + timedelta(minutes=1)).replace(tzinfo=None)

    assert titles(ordering.resolve_order([aware, naive])) == ["naive", "aware"]


def test_needs_normalization():
    assert ordering.needs_normalization([make_task("a", 0), make_task("b", None)])
    assert ordering.needs_normalization([make_task("a", 1), make_task("b", 1)])
    assert not ordering.needs_normalization([make_task("a", 0), make_task("b", 3)])


@pytest.mark.asyncio
async def test_next_position_appends(db, chores):
    # Todo already holds T1 (0) and T2 (1)
    assert await ordering.next_position(db, chores.todo.id) == 2

    empty = await store.create_column(db, chores.board.id, "Later")
    assert await ordering.next_position(db, empty.id) == 0


@pytest.mark.asyncio
async def test_next_position_is_zero_when_no_task_has_a_position(db, chores):
    await db.execute(
        update(Task).where(Task.column_id == chores.todo.id).values(position=None)
    )
    await db.commit()

    assert await ordering.next_position(db, chores.todo.id) == 0


@pytest.mark.asyncio
async def test_swap_moves_task_up(db, chores, user_id):
    t4 = await store.create_task(db, chores.board.id, chores.todo.id, user_id, title="T4")

    neighbour = await ordering.swap_adjacent(db, chores.todo.id, t4.id, ordering.UP)

    assert neighbour.id == chores.tasks["T2"].id
    ordered = await store.get_tasks_by_column_id(db, chores.todo.id)
    assert titles(ordered) == ["T1", "T4", "T2"]
    assert [t.position for t in ordered] == [0, 1, 2]


@pytest.mark.asyncio
async def test_swap_at_boundary_is_a_no_op(db, chores):
    before = [(t.id, t.position) for t in await store.get_tasks_by_column_id(db, chores.todo.id)]

    assert await ordering.swap_adjacent(db, chores.todo.id, chores.tasks["T1"].id, ordering.UP) is None
    assert await ordering.swap_adjacent(db, chores.todo.id, chores.tasks["T2"].id, ordering.DOWN) is None

    after = [(t.id, t.position) for t in await store.get_tasks_by_column_id(db, chores.todo.id)]
    assert after == before


@pytest.mark.asyncio
async def test_swap_normalizes_legacy_positions_first(db, chores, user_id):
    await store.create_task(db, chores.board.id, chores.todo.id, user_id, title="T4")
    await db.execute(
        update(Task).where(Task.column_id == chores.todo.id).values(position=None)
    )
    await db.commit()

    await ordering.swap_adjacent(db, chores.todo.id, chores.tasks["T1"].id, ordering.DOWN)

    ordered = await store.get_tasks_by_column_id(db, chores.todo.id)
    assert titles(ordered) == ["T2", "T1", "T4"]
    assert [t.position for t in ordered] == [0, 1, 2]


@pytest.mark.asyncio
async def test_swap_unknown_task_raises(db, chores):
    with pytest.raises(NotFound):
        await ordering.swap_adjacent(db, chores.todo.id, chores.tasks["T3"].id, ordering.UP)


@pytest.mark.asyncio
async def test_swap_rejects_bad_direction(db, chores):
    with pytest.raises(ValueError):
        await ordering.swap_adjacent(db, chores.todo.id, chores.tasks["T1"].id, "sideways")


@pytest.mark.asyncio
async def test_normalize_positions(db, chores, user_id):
    t4 = await store.create_task(db, chores.board.id, chores.todo.id, user_id, title="T4")
    await db.execute(update(Task).where(Task.id == t4.id).values(position=None))
    await db.execute(update(Task).where(Task.id == chores.tasks["T2"].id).values(position=7))
    await db.commit()

    ordered = await ordering.normalize_positions(db, chores.todo.id)

    assert titles(ordered) == ["T1", "T2", "T4"]
    assert [t.position for t in ordered] == [0, 1, 2]
