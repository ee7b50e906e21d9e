from taskboard.db.models.organization import Organization
from taskboard.db.models.board import Board
from taskboard.db.models.column import BoardColumn
from taskboard.db.models.task import Task
from taskboard.db.models.snapshot import BoardSnapshot, ColumnSnapshot, TaskSnapshot

__all__ = [
    "Organization",
    "Board",
    "BoardColumn",
    "Task",
    "BoardSnapshot",
    "ColumnSnapshot",
    "TaskSnapshot",
]
