import uuid
from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel

class OrganizationCreate(BaseModel):
    name: str
    code: Optional[str] = None

class OrganizationRead(BaseModel):
    id: uuid.UUID
    name: str
    code: str
    created_at: datetime

    class Config:
        from_attributes = True

class DailyEnsureRequest(BaseModel):
    utc_date: date

class ForegroundRequest(BaseModel):
    local_date: date

class DailyEnsureResult(BaseModel):
    utc_date: date
    # board id -> snapshot id, None where the board failed
    snapshots: Dict[uuid.UUID, Optional[uuid.UUID]]

class ForegroundResult(BaseModel):
    ensured: List[DailyEnsureResult]

class EnqueuedJob(BaseModel):
    job_id: Optional[str] = None
