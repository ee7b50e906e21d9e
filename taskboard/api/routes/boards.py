import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.deps import (
    get_current_organization_id,
    get_current_user_id,
    get_optional_user_id,
)
from taskboard.core import snapshots, store
from taskboard.core.ordering import resolve_order
from taskboard.db.session import get_db
from taskboard.schemas.board import BoardCreate, BoardDetail, BoardRead, BoardUpdate
from taskboard.schemas.column import ColumnCreate, ColumnRead
from taskboard.schemas.snapshot import (
    BoardSnapshotRequest,
    ColumnSnapshotRequest,
    SnapshotCreated,
)
from taskboard.schemas.task import TaskCreate, TaskRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


@router.get("/", response_model=List[BoardRead])
async def list_boards(
    active: Optional[bool] = None,
    organization_id: uuid.UUID = Depends(get_current_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """List the organization's boards, optionally only active ones."""
    if active:
        return await store.list_active_boards(db, organization_id)
    boards = await store.get_boards_by_organization(db, organization_id)
    if active is False:
        return [b for b in boards if b.finished_at is not None]
    return boards


@router.post("/", response_model=BoardRead, status_code=status.HTTP_201_CREATED)
async def create_board(
    board: BoardCreate,
    organization_id: uuid.UUID = Depends(get_current_organization_id),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await store.create_board(db, board.title, organization_id, user_id)


@router.get("/{board_id}", response_model=BoardDetail)
async def get_board(
    board_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Fetch a board with its columns and their tasks in display order."""
    board = await store.get_board_by_id(db, board_id)
    if not board:
        raise HTTPException(status_code=404, detail="Board not found")

    columns = await store.get_columns_by_board_id(db, board_id)
    tasks = await store.get_tasks_by_board_id(db, board_id)

    return {
        "id": board.id,
        "title": board.title,
        "organization_id": board.organization_id,
        "created_by": board.created_by,
        "created_at": board.created_at,
        "finished_at": board.finished_at,
        "columns": [
            {
                "id": c.id,
                "board_id": c.board_id,
                "title": c.title,
                "position": c.position,
                "color": c.color,
                "tasks": resolve_order([t for t in tasks if t.column_id == c.id]),
            }
            for c in columns
        ],
    }


@router.patch("/{board_id}", response_model=BoardRead)
async def update_board_title(
    board_id: uuid.UUID,
    data: BoardUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not data.title.strip():
        raise HTTPException(status_code=422, detail="Title is required")
    return await store.update_board_title(db, board_id, data.title)


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(
    board_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a board along with its columns and tasks."""
    await store.delete_board(db, board_id)


@router.post("/{board_id}/snapshot", response_model=SnapshotCreated)
async def snapshot_board(
    board_id: uuid.UUID,
    body: BoardSnapshotRequest,
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Finish & reset: archive the board and clear completion on its tasks."""
    provenance = snapshots.Provenance(
        submitted_by=user_id, submission_type=body.submission_type
    )
    snapshot_id = await snapshots.snapshot_board(
        db,
        board_id,
        finished_on=body.finished_on,
        dedupe=body.dedupe,
        provenance=provenance,
    )
    return {"snapshot_id": snapshot_id}


# --- Columns of a board --- #


@router.get("/{board_id}/columns", response_model=List[ColumnRead])
async def list_columns(
    board_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await store.get_columns_by_board_id(db, board_id)


@router.post(
    "/{board_id}/columns", response_model=ColumnRead, status_code=status.HTTP_201_CREATED
)
async def create_column(
    board_id: uuid.UUID,
    column: ColumnCreate,
    db: AsyncSession = Depends(get_db),
):
    return await store.create_column(db, board_id, column.title, column.color)


@router.post("/{board_id}/columns/{column_id}/snapshot", response_model=SnapshotCreated)
async def snapshot_column(
    board_id: uuid.UUID,
    column_id: uuid.UUID,
    body: ColumnSnapshotRequest,
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Archive one column and reset only its tasks."""
    provenance = snapshots.Provenance(
        submitted_by=user_id, submission_type=body.submission_type
    )
    snapshot_id = await snapshots.snapshot_column(db, board_id, column_id, provenance)
    return {"snapshot_id": snapshot_id}


# --- Tasks of a board --- #


@router.get("/{board_id}/tasks", response_model=List[TaskRead])
async def list_tasks(
    board_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await store.get_tasks_by_board_id(db, board_id)


@router.post("/{board_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    board_id: uuid.UUID,
    task: TaskCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await store.create_task(
        db,
        board_id,
        task.column_id,
        user_id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        due_time=task.due_time,
        importance_color=task.importance_color,
        allowed_weekdays=task.allowed_weekdays,
    )
