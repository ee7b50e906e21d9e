import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import ordering, store
from taskboard.db.session import get_db
from taskboard.schemas.column import ColumnRead, ColumnUpdate, TaskReorder
from taskboard.schemas.task import TaskRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/columns", tags=["columns"])


async def _require_column(db: AsyncSession, column_id: uuid.UUID):
    column = await store.get_column(db, column_id)
    if not column:
        raise HTTPException(status_code=404, detail="Column not found")
    return column


@router.patch("/{column_id}", response_model=ColumnRead)
async def rename_column(
    column_id: uuid.UUID,
    data: ColumnUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not data.title.strip():
        raise HTTPException(status_code=422, detail="Title is required")
    return await store.rename_column(db, column_id, data.title)


@router.delete("/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    column_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a column and every task in it."""
    await store.delete_column(db, column_id)


@router.get("/{column_id}/tasks", response_model=List[TaskRead])
async def list_column_tasks(
    column_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Tasks of the column in display order."""
    await _require_column(db, column_id)
    return await store.get_tasks_by_column_id(db, column_id)


@router.post("/{column_id}/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_column(
    column_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Clear completion on the column's tasks without taking a snapshot."""
    await store.reset_column_tasks(db, column_id)


@router.post("/{column_id}/normalize", response_model=List[TaskRead])
async def normalize_column(
    column_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Rewrite task positions as 0..n-1 in the current display order."""
    await _require_column(db, column_id)
    return await ordering.normalize_positions(db, column_id)


@router.post("/{column_id}/tasks/{task_id}/reorder", response_model=List[TaskRead])
async def reorder_task_in_column(
    column_id: uuid.UUID,
    task_id: uuid.UUID,
    data: TaskReorder,
    db: AsyncSession = Depends(get_db),
):
    """Move a task one place up or down. At the edge of the column nothing changes."""
    await _require_column(db, column_id)
    await ordering.swap_adjacent(db, column_id, task_id, data.direction)
    return await store.get_tasks_by_column_id(db, column_id)
