import uuid
from typing import Literal, Optional
from pydantic import BaseModel

class ColumnCreate(BaseModel):
    title: Optional[str] = None
    color: Optional[str] = None

class ColumnUpdate(BaseModel):
    title: str

class ColumnRead(BaseModel):
    id: uuid.UUID
    board_id: uuid.UUID
    title: str
    position: int
    color: Optional[str] = None

    class Config:
        from_attributes = True

class TaskReorder(BaseModel):
    direction: Literal["up", "down"]
