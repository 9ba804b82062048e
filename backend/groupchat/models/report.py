"""Report entity: escalations from group admins to super admins."""
import enum
from datetime import datetime
from typing import Optional

from pydantic import Field

from groupchat.models.base import Entity, new_id, utcnow


class ReportStatus(str, enum.Enum):
    pending = "pending"


class Report(Entity):
    id: str = Field(default_factory=new_id)
    reporter_id: str
    subject: str
    message: str
    type: str = "general"
    related_user_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)
    status: ReportStatus = ReportStatus.pending
