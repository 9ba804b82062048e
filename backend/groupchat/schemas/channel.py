"""Pydantic schemas for Channels."""
from pydantic import BaseModel


class ChannelCreate(BaseModel):
    name: str
    creator_id: str


class ChannelMemberChange(BaseModel):
    user_id: str
    admin_id: str


class ChannelOut(BaseModel):
    id: str
    name: str
    group_id: str
    creator_id: str
    member_ids: list[str] = []
    banned_user_ids: list[str] = []

    model_config = {"from_attributes": True}
