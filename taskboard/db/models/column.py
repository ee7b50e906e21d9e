import uuid

from sqlalchemy import Column, Integer, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from taskboard.db.base import Base

class BoardColumn(Base):
    __tablename__ = "myboard_columns"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    board_id = Column(
        Uuid, ForeignKey("myboard_boards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # display order among the board's columns
    color = Column(String, nullable=True)

    board = relationship("Board", back_populates="columns")
    tasks = relationship(
        "Task", back_populates="column", cascade="all, delete-orphan", passive_deletes=True
    )
