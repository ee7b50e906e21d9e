import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    Time,
    DateTime,
    ForeignKey,
    JSON,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship
from taskboard.core.clock import utc_now
from taskboard.db.base import Base

class Task(Base):
    __tablename__ = "myboard_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    board_id = Column(
        Uuid, ForeignKey("myboard_boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    column_id = Column(
        Uuid, ForeignKey("myboard_columns.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    due_date = Column(Date, nullable=True)
    due_time = Column(Time, nullable=True)
    importance_color = Column(String, nullable=True)
    position = Column(Integer, nullable=True)  # NULL on legacy rows, ordered by created_at
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now())
    created_by = Column(Uuid, nullable=False)
    allowed_weekdays = Column(JSON, nullable=True)  # list of 0..6

    column = relationship("BoardColumn", back_populates="tasks")
