import uuid

from sqlalchemy import Column, String, DateTime, Uuid, func
from sqlalchemy.orm import relationship
from taskboard.core.clock import utc_now
from taskboard.db.base import Base

class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    code = Column(String, nullable=False, unique=True, index=True)  # invite code
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())

    boards = relationship("Board", back_populates="organization", passive_deletes=True)
