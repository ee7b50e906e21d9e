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
    Index,
    Uuid,
    false,
    func,
    text,
)
from sqlalchemy.orm import relationship
from taskboard.core.clock import utc_now
from taskboard.db.base import Base

SUBMISSION_USER = "user"
SUBMISSION_ADMIN_FINISH = "admin_finish"


class BoardSnapshot(Base):
    __tablename__ = "myboard_board_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # No foreign key: snapshots outlive the board they were taken from
    board_id = Column(Uuid, nullable=False, index=True)
    organization_id = Column(Uuid, nullable=False, index=True)
    title = Column(String, nullable=False)
    finished_on = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now())
    submitted_by = Column(Uuid, nullable=True)
    submission_type = Column(String, nullable=True)  # "user" | "admin_finish"
    is_daily = Column(Boolean, nullable=False, default=False, server_default=false())
    # Set for single-column snapshots; NULL means the whole board was captured
    column_id = Column(Uuid, nullable=True)

    columns = relationship(
        "ColumnSnapshot",
        back_populates="board_snapshot",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ColumnSnapshot.position",
    )
    tasks = relationship(
        "TaskSnapshot",
        back_populates="board_snapshot",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TaskSnapshot.capture_index",
    )

    __table_args__ = (
        # At most one deduplicated snapshot per board per day
        Index(
            "uq_board_snapshot_daily",
            "board_id",
            "finished_on",
            unique=True,
            postgresql_where=text("is_daily"),
            sqlite_where=text("is_daily"),
        ),
    )


class ColumnSnapshot(Base):
    __tablename__ = "myboard_column_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    board_snapshot_id = Column(
        Uuid,
        ForeignKey("myboard_board_snapshots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    original_column_id = Column(Uuid, nullable=False)

    board_snapshot = relationship("BoardSnapshot", back_populates="columns")


class TaskSnapshot(Base):
    __tablename__ = "myboard_task_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    board_snapshot_id = Column(
        Uuid,
        ForeignKey("myboard_board_snapshots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    due_date = Column(Date, nullable=True)
    due_time = Column(Time, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(Uuid, nullable=True)
    importance_color = Column(String, nullable=True)
    position = Column(Integer, nullable=True)
    original_column_id = Column(Uuid, nullable=False)
    original_task_id = Column(Uuid, nullable=False)
    capture_index = Column(Integer, nullable=False, default=0)  # read-back order

    board_snapshot = relationship("BoardSnapshot", back_populates="tasks")
