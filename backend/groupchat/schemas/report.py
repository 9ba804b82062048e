"""Pydantic schemas for Reports."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from groupchat.models.report import ReportStatus


class ReportCreate(BaseModel):
    reporter_id: str
    subject: str
    message: str
    type: str = "general"
    related_user_id: Optional[str] = None


class ReportOut(BaseModel):
    id: str
    reporter_id: str
    subject: str
    message: str
    type: str
    related_user_id: Optional[str] = None
    timestamp: datetime
    status: ReportStatus

    model_config = {"from_attributes": True}
