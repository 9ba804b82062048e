"""Pydantic schemas for Groups and join requests."""
from datetime import datetime
from pydantic import BaseModel


class GroupCreate(BaseModel):
    name: str
    creator_id: str


class GroupOut(BaseModel):
    id: str
    name: str
    owner_id: str
    member_ids: list[str] = []
    admin_ids: list[str] = []

    model_config = {"from_attributes": True}


class GroupMemberAdd(BaseModel):
    user_id: str
    admin_id: str


class GroupLeave(BaseModel):
    user_id: str


class InterestCreate(BaseModel):
    user_id: str


class InterestOut(BaseModel):
    id: str
    group_id: str
    user_id: str
    timestamp: datetime

    model_config = {"from_attributes": True}
