import uuid
from datetime import date, datetime, time
from typing import List, Literal, Optional
from pydantic import BaseModel

SubmissionType = Literal["user", "admin_finish"]

class BoardSnapshotRequest(BaseModel):
    finished_on: Optional[date] = None
    dedupe: bool = False
    submission_type: Optional[SubmissionType] = "user"

class ColumnSnapshotRequest(BaseModel):
    submission_type: Optional[SubmissionType] = "user"

class SnapshotCreated(BaseModel):
    # None when the board no longer exists
    snapshot_id: Optional[uuid.UUID] = None

class BoardSnapshotRead(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    organization_id: uuid.UUID
    title: str
    finished_on: date
    created_at: datetime
    submitted_by: Optional[uuid.UUID] = None
    submission_type: Optional[str] = None
    column_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True

class ColumnSnapshotRead(BaseModel):
    id: uuid.UUID
    title: str
    position: int
    original_column_id: uuid.UUID

    class Config:
        from_attributes = True

class TaskSnapshotRead(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    completed: bool
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[uuid.UUID] = None
    importance_color: Optional[str] = None
    position: Optional[int] = None
    original_column_id: uuid.UUID
    original_task_id: uuid.UUID

    class Config:
        from_attributes = True

class SnapshotDetail(BoardSnapshotRead):
    columns: List[ColumnSnapshotRead]
    tasks: List[TaskSnapshotRead]
