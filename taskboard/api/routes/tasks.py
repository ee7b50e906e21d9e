import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.deps import get_current_user_id
from taskboard.core import store
from taskboard.db.session import get_db
from taskboard.schemas.task import TaskComplete, TaskCopy, TaskMove, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await store.update_task(db, task_id, **data.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    await store.delete_task(db, task_id)


@router.post("/{task_id}/complete", response_model=TaskRead)
async def complete_task(
    task_id: uuid.UUID,
    data: TaskComplete,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await store.set_task_completed(db, task_id, data.completed, user_id)


@router.post("/{task_id}/move", response_model=TaskRead)
async def move_task(
    task_id: uuid.UUID,
    data: TaskMove,
    db: AsyncSession = Depends(get_db),
):
    return await store.move_task(db, task_id, data.column_id)


@router.post("/{task_id}/copy", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def copy_task_to_board(
    task_id: uuid.UUID,
    data: TaskCopy,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Copy a task into a column of another board. The source stays as it is."""
    return await store.copy_task_to_board(
        db, task_id, data.target_board_id, data.target_column_id, user_id
    )
