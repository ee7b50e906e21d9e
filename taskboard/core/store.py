"""
CRUD primitives over organizations, boards, columns and tasks.

Reads return None or empty lists for unknown ids; writes raise NotFound so
that no partial change is committed.
"""
import logging
import secrets
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.clock import utc_now
from taskboard.core.errors import InvalidTarget, NotFound
from taskboard.core.ordering import next_position, resolve_order
from taskboard.db.models import Board, BoardColumn, Organization, Task
from taskboard.db.session import write_transaction

logger = logging.getLogger(__name__)

DEFAULT_BOARD_TITLE = "Untitled Board"
DEFAULT_COLUMN_TITLE = "Untitled"
DEFAULT_TASK_TITLE = "Untitled Task"

# Fields a caller may change through update_task
TASK_UPDATABLE_FIELDS = (
    "title",
    "description",
    "due_date",
    "due_time",
    "importance_color",
    "allowed_weekdays",
)

# Fields carried over when a task is copied to another board
TASK_COPY_FIELDS = TASK_UPDATABLE_FIELDS


def _clean_title(title: Optional[str], default: str) -> str:
    title = (title or "").strip()
    return title or default


def _clean_weekdays(weekdays: Optional[Iterable[int]]) -> Optional[List[int]]:
    if weekdays is None:
        return None
    days = sorted(set(int(d) for d in weekdays))
    if any(d < 0 or d > 6 for d in days):
        raise ValueError(f"weekdays must be between 0 and 6, got {days}")
    return days


# --- Organizations --- #


async def create_organization(db: AsyncSession, name: str, code: Optional[str] = None) -> Organization:
    org = Organization(name=name.strip(), code=code or secrets.token_hex(4).upper())
    async with write_transaction(db, "create organization"):
        db.add(org)
    return org


async def get_organization(db: AsyncSession, organization_id) -> Optional[Organization]:
    return await db.get(Organization, organization_id)


async def get_organization_by_invite_code(db: AsyncSession, code: str) -> Optional[Organization]:
    result = await db.execute(select(Organization).where(Organization.code == code))
    return result.scalar_one_or_none()


# --- Boards --- #


async def get_board_by_id(db: AsyncSession, board_id) -> Optional[Board]:
    return await db.get(Board, board_id)


async def require_board(db: AsyncSession, board_id) -> Board:
    board = await get_board_by_id(db, board_id)
    if not board:
        raise NotFound("board", board_id)
    return board


async def get_boards_by_organization(db: AsyncSession, organization_id) -> List[Board]:
    result = await db.execute(
        select(Board)
        .where(Board.organization_id == organization_id)
        .order_by(Board.created_at.asc())
    )
    return list(result.scalars().all())


async def list_active_boards(db: AsyncSession, organization_id) -> List[Board]:
    """Boards of the organization that have not been finished."""
    result = await db.execute(
        select(Board)
        .where(Board.organization_id == organization_id, Board.finished_at.is_(None))
        .order_by(Board.created_at.asc())
    )
    return list(result.scalars().all())


async def create_board(db: AsyncSession, title: Optional[str], organization_id, created_by) -> Board:
    if not await get_organization(db, organization_id):
        raise NotFound("organization", organization_id)
    board = Board(
        title=_clean_title(title, DEFAULT_BOARD_TITLE),
        organization_id=organization_id,
        created_by=created_by,
    )
    async with write_transaction(db, "create board"):
        db.add(board)
    return board


async def update_board_title(db: AsyncSession, board_id, title: str) -> Board:
    async with write_transaction(db, f"rename board {board_id}"):
        board = await require_board(db, board_id)
        board.title = _clean_title(title, board.title)
    return board


async def mark_board_finished(db: AsyncSession, board: Board) -> None:
    """Archive the board. Repeating it keeps the first finish time."""
    if board.finished_at is None:
        board.finished_at = utc_now()


async def delete_board(db: AsyncSession, board_id) -> None:
    async with write_transaction(db, f"delete board {board_id}"):
        board = await require_board(db, board_id)
        await db.execute(delete(Task).where(Task.board_id == board_id))
        await db.execute(delete(BoardColumn).where(BoardColumn.board_id == board_id))
        await db.delete(board)
    logger.info(f"Deleted board {board_id}")


# --- Columns --- #


async def get_column(db: AsyncSession, column_id) -> Optional[BoardColumn]:
    return await db.get(BoardColumn, column_id)


async def require_column(db: AsyncSession, board_id, column_id) -> BoardColumn:
    column = await get_column(db, column_id)
    if not column or column.board_id != board_id:
        raise NotFound("column", column_id)
    return column


async def get_columns_by_board_id(db: AsyncSession, board_id) -> List[BoardColumn]:
    result = await db.execute(
        select(BoardColumn)
        .where(BoardColumn.board_id == board_id)
        .order_by(BoardColumn.position.asc())
    )
    return list(result.scalars().all())


async def create_column(db: AsyncSession, board_id, title: Optional[str], color: Optional[str] = None) -> BoardColumn:
    async with write_transaction(db, f"create column on board {board_id}"):
        await require_board(db, board_id)
        result = await db.execute(
            select(func.max(BoardColumn.position)).where(BoardColumn.board_id == board_id)
        )
        current = result.scalar_one_or_none()
        column = BoardColumn(
            board_id=board_id,
            title=_clean_title(title, DEFAULT_COLUMN_TITLE),
            position=0 if current is None else current + 1,
            color=color,
        )
        db.add(column)
    return column


async def rename_column(db: AsyncSession, column_id, title: str) -> BoardColumn:
    async with write_transaction(db, f"rename column {column_id}"):
        column = await get_column(db, column_id)
        if not column:
            raise NotFound("column", column_id)
        column.title = _clean_title(title, column.title)
    return column


async def delete_column(db: AsyncSession, column_id) -> None:
    async with write_transaction(db, f"delete column {column_id}"):
        column = await get_column(db, column_id)
        if not column:
            raise NotFound("column", column_id)
        await db.execute(delete(Task).where(Task.column_id == column_id))
        await db.delete(column)
    logger.info(f"Deleted column {column_id}")


# --- Tasks --- #


async def get_task(db: AsyncSession, task_id) -> Optional[Task]:
    return await db.get(Task, task_id)


async def require_task(db: AsyncSession, task_id) -> Task:
    task = await get_task(db, task_id)
    if not task:
        raise NotFound("task", task_id)
    return task


async def get_tasks_by_board_id(db: AsyncSession, board_id) -> List[Task]:
    result = await db.execute(
        select(Task).where(Task.board_id == board_id).order_by(Task.created_at.asc())
    )
    return list(result.scalars().all())


async def get_tasks_by_column_id(db: AsyncSession, column_id) -> List[Task]:
    result = await db.execute(select(Task).where(Task.column_id == column_id))
    return resolve_order(result.scalars().all())


async def create_task(
    db: AsyncSession,
    board_id,
    column_id,
    created_by,
    title: Optional[str] = None,
    description: Optional[str] = None,
    due_date=None,
    due_time=None,
    importance_color: Optional[str] = None,
    allowed_weekdays: Optional[Iterable[int]] = None,
) -> Task:
    async with write_transaction(db, f"create task on board {board_id}"):
        await require_board(db, board_id)
        column = await get_column(db, column_id)
        if not column or column.board_id != board_id:
            raise InvalidTarget(f"column {column_id} does not belong to board {board_id}")

        task = Task(
            board_id=board_id,
            column_id=column_id,
            title=_clean_title(title, DEFAULT_TASK_TITLE),
            description=description,
            due_date=due_date,
            due_time=due_time,
            importance_color=importance_color,
            allowed_weekdays=_clean_weekdays(allowed_weekdays),
            position=await next_position(db, column_id),
            completed=False,
            created_by=created_by,
        )
        db.add(task)
    return task


async def update_task(db: AsyncSession, task_id, **changes) -> Task:
    unknown = set(changes) - set(TASK_UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update task fields: {sorted(unknown)}")

    async with write_transaction(db, f"update task {task_id}"):
        task = await require_task(db, task_id)
        for field, value in changes.items():
            if field == "title":
                value = _clean_title(value, task.title)
            elif field == "allowed_weekdays":
                value = _clean_weekdays(value)
            setattr(task, field, value)
    return task


async def set_task_completed(db: AsyncSession, task_id, completed: bool, user_id=None) -> Task:
    """Toggle completion, recording who completed the task and when."""
    async with write_transaction(db, f"complete task {task_id}"):
        task = await require_task(db, task_id)
        task.completed = completed
        task.completed_at = utc_now() if completed else None
        task.completed_by = user_id if completed else None
    return task


async def move_task(db: AsyncSession, task_id, to_column_id) -> Task:
    """Move a task to another column of its board, appending it at the end."""
    async with write_transaction(db, f"move task {task_id}"):
        task = await require_task(db, task_id)
        column = await get_column(db, to_column_id)
        if not column or column.board_id != task.board_id:
            raise InvalidTarget(
                f"column {to_column_id} does not belong to board {task.board_id}"
            )
        if task.column_id != to_column_id:
            task.position = await next_position(db, to_column_id)
            task.column_id = to_column_id
    return task


async def delete_task(db: AsyncSession, task_id) -> None:
    async with write_transaction(db, f"delete task {task_id}"):
        task = await require_task(db, task_id)
        await db.delete(task)


def completion_reset_values() -> dict:
    return {"completed": False, "completed_at": None, "completed_by": None}


async def reset_column_tasks(db: AsyncSession, column_id) -> None:
    """Clear completion on a column's tasks without archiving them."""
    async with write_transaction(db, f"reset column {column_id}"):
        if not await get_column(db, column_id):
            raise NotFound("column", column_id)
        await db.execute(
            update(Task).where(Task.column_id == column_id).values(**completion_reset_values())
        )
    logger.info(f"Reset tasks in column {column_id}")


async def copy_task_to_board(
    db: AsyncSession, source_task_id, target_board_id, target_column_id, acting_user_id
) -> Task:
    """
    Duplicate a task into a column of another (or the same) board.

    The copy starts uncompleted, belongs to ``acting_user_id`` and goes to the
    end of the target column. The source task is not touched.
    """
    async with write_transaction(db, f"copy task {source_task_id}"):
        source = await require_task(db, source_task_id)
        column = await get_column(db, target_column_id)
        if not column or column.board_id != target_board_id:
            raise InvalidTarget(
                f"column {target_column_id} does not belong to board {target_board_id}"
            )

        copied = Task(
            board_id=target_board_id,
            column_id=target_column_id,
            created_by=acting_user_id,
            position=await next_position(db, target_column_id),
            **{field: getattr(source, field) for field in TASK_COPY_FIELDS},
            **completion_reset_values(),
        )
        if copied.allowed_weekdays is not None:
            copied.allowed_weekdays = list(copied.allowed_weekdays)
        db.add(copied)

    logger.info(
        f"Copied task {source_task_id} to board {target_board_id} column {target_column_id}"
    )
    return copied
