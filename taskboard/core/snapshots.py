"""
Snapshot engine: archive a board (or one of its columns) as an immutable
point-in-time record, then reset completion on the live tasks that were
captured.

Capture, reset and the board's finish mark are written in one transaction,
so a failure leaves neither a half-written snapshot nor reset tasks behind.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.clock import utc_today
from taskboard.core.errors import ConcurrencyConflict, NotFound, StoreWriteFailure
from taskboard.core.ordering import resolve_order
from taskboard.core.store import (
    completion_reset_values,
    get_board_by_id,
    get_columns_by_board_id,
    get_tasks_by_board_id,
    mark_board_finished,
    require_column,
)
from taskboard.db.models import (
    Board,
    BoardColumn,
    BoardSnapshot,
    ColumnSnapshot,
    Task,
    TaskSnapshot,
)
from taskboard.db.models.snapshot import SUBMISSION_ADMIN_FINISH, SUBMISSION_USER
from taskboard.db.session import write_transaction

logger = logging.getLogger(__name__)

SUBMISSION_TYPES = (SUBMISSION_USER, SUBMISSION_ADMIN_FINISH)


@dataclass(frozen=True)
class Provenance:
    """Who triggered a snapshot and through which action."""

    submitted_by: Optional[object] = None
    submission_type: Optional[str] = None

    def __post_init__(self):
        if self.submission_type is not None and self.submission_type not in SUBMISSION_TYPES:
            raise ValueError(f"Unknown submission type: {self.submission_type!r}")


NO_PROVENANCE = Provenance()


def order_tasks_for_capture(
    columns: Sequence[BoardColumn], tasks: Sequence[Task]
) -> List[Task]:
    """
    Group tasks by column in column order, each group in display order.
    Tasks pointing at a column that is not in ``columns`` come last.
    """
    by_column: Dict[object, List[Task]] = {c.id: [] for c in columns}
    orphans: List[Task] = []
    for task in tasks:
        if task.column_id in by_column:
            by_column[task.column_id].append(task)
        else:
            orphans.append(task)

    ordered: List[Task] = []
    for column in columns:
        ordered.extend(resolve_order(by_column[column.id]))
    ordered.extend(resolve_order(orphans))
    return ordered


def _task_snapshot(snapshot_id, task: Task, capture_index: int) -> TaskSnapshot:
    return TaskSnapshot(
        board_snapshot_id=snapshot_id,
        title=task.title,
        description=task.description,
        completed=bool(task.completed),
        due_date=task.due_date,
        due_time=task.due_time,
        completed_at=task.completed_at,
        completed_by=task.completed_by,
        importance_color=task.importance_color,
        position=task.position,
        original_column_id=task.column_id,
        original_task_id=task.id,
        capture_index=capture_index,
    )


def _capture(
    db: AsyncSession,
    snapshot: BoardSnapshot,
    columns: Sequence[BoardColumn],
    tasks: Sequence[Task],
) -> None:
    db.add_all(
        ColumnSnapshot(
            board_snapshot_id=snapshot.id,
            title=column.title,
            position=column.position,
            original_column_id=column.id,
        )
        for column in columns
    )
    db.add_all(
        _task_snapshot(snapshot.id, task, idx)
        for idx, task in enumerate(order_tasks_for_capture(columns, tasks))
    )


async def find_snapshot_for_day(db: AsyncSession, board_id, finished_on: date) -> Optional[BoardSnapshot]:
    # Whole-board rows only; daily rows first since the unique index guards them
    result = await db.execute(
        select(BoardSnapshot)
        .where(
            BoardSnapshot.board_id == board_id,
            BoardSnapshot.finished_on == finished_on,
            BoardSnapshot.column_id.is_(None),
        )
        .order_by(BoardSnapshot.is_daily.desc(), BoardSnapshot.created_at.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _return_existing(db: AsyncSession, board: Board, existing: BoardSnapshot):
    """Dedup hit: no capture, no reset. Finishing the board is idempotent."""
    if board.finished_at is None:
        async with write_transaction(db, f"finish board {board.id}"):
            await mark_board_finished(db, board)
    logger.info(
        f"Snapshot for board {board.id} on {existing.finished_on} already exists ({existing.id})"
    )
    return existing.id


async def snapshot_board(
    db: AsyncSession,
    board_id,
    finished_on: Optional[date] = None,
    dedupe: bool = False,
    provenance: Optional[Provenance] = None,
):
    """
    Archive the whole board and reset completion on all of its tasks.

    Returns the snapshot id, or None when the board does not exist. With
    ``dedupe`` an existing snapshot of the board for ``finished_on`` is
    returned as-is and nothing is written besides the board's finish mark.
    """
    provenance = provenance or NO_PROVENANCE
    finished_on = finished_on or utc_today()

    board = await get_board_by_id(db, board_id)
    if not board:
        logger.info(f"Snapshot skipped: board {board_id} not found")
        return None

    if dedupe:
        existing = await find_snapshot_for_day(db, board_id, finished_on)
        if existing:
            return await _return_existing(db, board, existing)

    snapshot = BoardSnapshot(
        board_id=board.id,
        organization_id=board.organization_id,
        title=board.title,
        finished_on=finished_on,
        submitted_by=provenance.submitted_by,
        submission_type=provenance.submission_type,
        is_daily=dedupe,
    )

    try:
        async with write_transaction(db, f"snapshot board {board_id}"):
            db.add(snapshot)
            await db.flush()

            columns = await get_columns_by_board_id(db, board_id)
            tasks = await get_tasks_by_board_id(db, board_id)
            _capture(db, snapshot, columns, tasks)

            await db.execute(
                update(Task).where(Task.board_id == board_id).values(**completion_reset_values())
            )
            await mark_board_finished(db, board)
    except StoreWriteFailure as e:
        # A concurrent daily snapshot won the unique index: return it instead
        if dedupe and isinstance(e.__cause__, IntegrityError):
            await db.refresh(board)
            winner = await find_snapshot_for_day(db, board_id, finished_on)
            if winner:
                logger.info(f"Daily snapshot race on board {board_id} lost to {winner.id}")
                return await _return_existing(db, board, winner)
            raise ConcurrencyConflict(
                f"daily snapshot for board {board_id} on {finished_on} conflicted"
            ) from e
        raise

    logger.info(
        f"Board {board_id} snapshot {snapshot.id} for {finished_on}: "
        f"{len(columns)} columns, {len(tasks)} tasks captured and reset"
    )
    return snapshot.id


async def snapshot_column(
    db: AsyncSession,
    board_id,
    column_id,
    provenance: Optional[Provenance] = None,
):
    """
    Archive a single column and reset only that column's tasks.

    The board itself stays active. Returns None when the board does not
    exist; raises NotFound when the column is not on the board.
    """
    provenance = provenance or NO_PROVENANCE

    board = await get_board_by_id(db, board_id)
    if not board:
        logger.info(f"Column snapshot skipped: board {board_id} not found")
        return None
    column = await require_column(db, board_id, column_id)

    snapshot = BoardSnapshot(
        board_id=board.id,
        organization_id=board.organization_id,
        title=f"{board.title} - {column.title}",
        finished_on=utc_today(),
        submitted_by=provenance.submitted_by,
        submission_type=provenance.submission_type,
        is_daily=False,
        column_id=column.id,
    )

    async with write_transaction(db, f"snapshot column {column_id}"):
        db.add(snapshot)
        await db.flush()

        result = await db.execute(
            select(Task).where(Task.board_id == board_id, Task.column_id == column_id)
        )
        tasks = result.scalars().all()
        _capture(db, snapshot, [column], tasks)

        await db.execute(
            update(Task)
            .where(Task.board_id == board_id, Task.column_id == column_id)
            .values(**completion_reset_values())
        )

    logger.info(
        f"Column {column_id} snapshot {snapshot.id}: {len(tasks)} tasks captured and reset"
    )
    return snapshot.id


async def delete_snapshot(db: AsyncSession, snapshot_id) -> None:
    """Delete a snapshot with its column and task copies. There is no undo."""
    async with write_transaction(db, f"delete snapshot {snapshot_id}"):
        snapshot = await db.get(BoardSnapshot, snapshot_id)
        if not snapshot:
            raise NotFound("snapshot", snapshot_id)
        await db.execute(
            delete(TaskSnapshot).where(TaskSnapshot.board_snapshot_id == snapshot_id)
        )
        await db.execute(
            delete(ColumnSnapshot).where(ColumnSnapshot.board_snapshot_id == snapshot_id)
        )
        await db.delete(snapshot)
    logger.info(f"Deleted snapshot {snapshot_id}")


# --- Read side --- #


async def list_snapshots_by_organization(db: AsyncSession, organization_id) -> List[BoardSnapshot]:
    result = await db.execute(
        select(BoardSnapshot)
        .where(BoardSnapshot.organization_id == organization_id)
        .order_by(BoardSnapshot.finished_on.desc(), BoardSnapshot.created_at.desc())
    )
    return list(result.scalars().all())


async def get_snapshot(db: AsyncSession, snapshot_id) -> Optional[BoardSnapshot]:
    return await db.get(BoardSnapshot, snapshot_id)


async def get_snapshot_columns(db: AsyncSession, snapshot_id) -> List[ColumnSnapshot]:
    result = await db.execute(
        select(ColumnSnapshot)
        .where(ColumnSnapshot.board_snapshot_id == snapshot_id)
        .order_by(ColumnSnapshot.position.asc())
    )
    return list(result.scalars().all())


async def get_snapshot_tasks(db: AsyncSession, snapshot_id) -> List[TaskSnapshot]:
    result = await db.execute(
        select(TaskSnapshot)
        .where(TaskSnapshot.board_snapshot_id == snapshot_id)
        .order_by(TaskSnapshot.capture_index.asc())
    )
    return list(result.scalars().all())
