"""
Task ordering within a column.

Columns migrated from the creation-time era may hold tasks without a
``position``. Each column picks its strategy at read time: as soon as one
task carries a position the column is position-ordered (missing positions
sort last), otherwise tasks are ordered by creation time.
``normalize_positions`` removes the mixed mode for a column for good.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from taskboard.core.errors import NotFound
from taskboard.db.models import Task
from taskboard.db.session import write_transaction

logger = logging.getLogger(__name__)

UP = "up"
DOWN = "down"
DIRECTIONS = (UP, DOWN)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _created_key(task) -> datetime:
    created = task.created_at
    if created is None:
        return _EPOCH
    # SQLite hands back naive values; everything is stored as UTC
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


class OrderingStrategy:
    name = "base"

    def sort(self, tasks: Sequence[Task]) -> List[Task]:
        raise NotImplementedError


class PositionOrdered(OrderingStrategy):
    name = "position"

    def sort(self, tasks):
        return sorted(
            tasks,
            key=lambda t: (t.position is None, t.position or 0, _created_key(t)),
        )


class CreationOrdered(OrderingStrategy):
    name = "creation"

    def sort(self, tasks):
        return sorted(tasks, key=_created_key)


POSITION_ORDERED = PositionOrdered()
CREATION_ORDERED = CreationOrdered()


def strategy_for(tasks: Sequence[Task]) -> OrderingStrategy:
    if any(t.position is not None for t in tasks):
        return POSITION_ORDERED
    return CREATION_ORDERED


def resolve_order(tasks: Sequence[Task]) -> List[Task]:
    """Order the tasks of one column the way the board displays them."""
    return strategy_for(tasks).sort(tasks)


def needs_normalization(tasks: Sequence[Task]) -> bool:
    positions = [t.position for t in tasks]
    if any(p is None for p in positions):
        return True
    return len(set(positions)) != len(positions)


async def next_position(db: AsyncSession, column_id) -> int:
    """Position that appends a task to the end of the column."""
    result = await db.execute(
        select(func.max(Task.position)).where(Task.column_id == column_id)
    )
    current = result.scalar_one_or_none()
    return 0 if current is None else current + 1


async def load_column_tasks(db: AsyncSession, column_id) -> List[Task]:
    result = await db.execute(select(Task).where(Task.column_id == column_id))
    return resolve_order(result.scalars().all())


def _assign_positions(ordered: Sequence[Task]) -> None:
    for idx, task in enumerate(ordered):
        task.position = idx


async def normalize_positions(db: AsyncSession, column_id) -> List[Task]:
    """Give every task in the column its index in the resolved order."""
    async with write_transaction(db, f"normalize column {column_id}"):
        ordered = await load_column_tasks(db, column_id)
        _assign_positions(ordered)
    logger.info(f"Normalized {len(ordered)} task positions in column {column_id}")
    return ordered


async def swap_adjacent(
    db: AsyncSession, column_id, task_id, direction: str
) -> Optional[Task]:
    """
    Exchange a task's position with its neighbour in ``direction``.

    Returns the neighbour that was swapped with, or None when the task is
    already at that edge of the column.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")

    async with write_transaction(db, f"reorder task {task_id}"):
        ordered = await load_column_tasks(db, column_id)
        index = next((i for i, t in enumerate(ordered) if t.id == task_id), None)
        if index is None:
            raise NotFound("task", task_id)

        neighbour_index = index - 1 if direction == UP else index + 1
        if neighbour_index < 0 or neighbour_index >= len(ordered):
            return None

        if needs_normalization(ordered):
            _assign_positions(ordered)
            await db.flush()

        task, neighbour = ordered[index], ordered[neighbour_index]
        task_pos, neighbour_pos = task.position, neighbour.position

        # Both rows change in a single statement
        await db.execute(
            update(Task)
            .where(Task.id.in_([task.id, neighbour.id]))
            .values(
                position=case(
                    (Task.id == task.id, neighbour_pos),
                    else_=task_pos,
                )
            ),
            execution_options={"synchronize_session": False},
        )
        set_committed_value(task, "position", neighbour_pos)
        set_committed_value(neighbour, "position", task_pos)

    logger.info(
        f"Swapped task {task_id} {direction} with {neighbour.id} in column {column_id}"
    )
    return neighbour
