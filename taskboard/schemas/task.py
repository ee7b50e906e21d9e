import uuid
from datetime import date, datetime, time
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field

Weekday = Annotated[int, Field(ge=0, le=6)]

class TaskCreate(BaseModel):
    column_id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    importance_color: Optional[str] = None
    allowed_weekdays: Optional[List[Weekday]] = Field(default=None, max_length=7)

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    importance_color: Optional[str] = None
    allowed_weekdays: Optional[List[Weekday]] = Field(default=None, max_length=7)

class TaskRead(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    column_id: uuid.UUID
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    importance_color: Optional[str] = None
    position: Optional[int] = None
    completed: bool
    completed_at: Optional[datetime] = None
    completed_by: Optional[uuid.UUID] = None
    created_at: datetime
    created_by: uuid.UUID
    allowed_weekdays: Optional[List[int]] = None

    class Config:
        from_attributes = True

class TaskComplete(BaseModel):
    completed: bool = True

class TaskMove(BaseModel):
    column_id: uuid.UUID

class TaskCopy(BaseModel):
    target_board_id: uuid.UUID
    target_column_id: uuid.UUID
