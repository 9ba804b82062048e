"""GroupInterest entity: a pending join request."""
from datetime import datetime

from pydantic import Field

from groupchat.models.base import Entity, new_id, utcnow


class GroupInterest(Entity):
    id: str = Field(default_factory=new_id)
    group_id: str
    user_id: str
    timestamp: datetime = Field(default_factory=utcnow)
