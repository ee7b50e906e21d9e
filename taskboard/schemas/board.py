import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from taskboard.schemas.column import ColumnRead
from taskboard.schemas.task import TaskRead

class BoardCreate(BaseModel):
    title: Optional[str] = None

class BoardUpdate(BaseModel):
    title: str

class BoardRead(BaseModel):
    id: uuid.UUID
    title: str
    organization_id: uuid.UUID
    created_by: uuid.UUID
    created_at: datetime
    finished_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ColumnWithTasks(ColumnRead):
    tasks: List[TaskRead]

class BoardDetail(BoardRead):
    columns: List[ColumnWithTasks]
