import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.deps import get_current_organization_id
from taskboard.core import snapshots
from taskboard.db.session import get_db
from taskboard.schemas.snapshot import BoardSnapshotRead, SnapshotDetail

router = APIRouter(prefix="/api/snapshots", tags=["snapshots"])


@router.get("/", response_model=List[BoardSnapshotRead])
async def list_snapshots(
    organization_id: uuid.UUID = Depends(get_current_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Snapshot history of the organization, newest first."""
    return await snapshots.list_snapshots_by_organization(db, organization_id)


@router.get("/{snapshot_id}", response_model=SnapshotDetail)
async def get_snapshot(
    snapshot_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Fetch a snapshot with its archived columns and tasks."""
    snapshot = await snapshots.get_snapshot(db, snapshot_id)
    if not snapshot:
        raise HTTPException(status_code=404, detail="Snapshot not found")

    return {
        "id": snapshot.id,
        "board_id": snapshot.board_id,
        "organization_id": snapshot.organization_id,
        "title": snapshot.title,
        "finished_on": snapshot.finished_on,
        "created_at": snapshot.created_at,
        "submitted_by": snapshot.submitted_by,
        "submission_type": snapshot.submission_type,
        "column_id": snapshot.column_id,
        "columns": await snapshots.get_snapshot_columns(db, snapshot_id),
        "tasks": await snapshots.get_snapshot_tasks(db, snapshot_id),
    }


@router.delete("/{snapshot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_snapshot(
    snapshot_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a snapshot and everything archived in it."""
    await snapshots.delete_snapshot(db, snapshot_id)
