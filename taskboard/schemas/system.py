from pydantic import BaseModel

class SystemStats(BaseModel):
    organizations: int
    boards: int
    active_boards: int
    tasks: int
    snapshots: int
