"""StateSnapshot ORM model: one row per persisted copy of the entity store."""
from sqlalchemy import Column, DateTime, Integer, JSON
from sqlalchemy.sql import func

from groupchat.database import Base


class StateSnapshot(Base):
    __tablename__ = "state_snapshots"

    snapshot_id = Column(Integer, primary_key=True, autoincrement=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
