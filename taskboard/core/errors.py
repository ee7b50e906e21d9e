class TaskboardError(Exception):
    """Base class for errors raised by the board core."""


class NotFound(TaskboardError):
    """A referenced organization, board, column, task or snapshot does not exist."""

    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class InvalidTarget(TaskboardError):
    """A column was addressed through a board it does not belong to."""


class StoreWriteFailure(TaskboardError):
    """An insert, update or delete failed; the transaction was rolled back."""


class ConcurrencyConflict(TaskboardError):
    """The store rejected a write because a concurrent writer got there first."""
