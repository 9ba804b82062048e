"""Group management API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from groupchat.dependencies import get_store
from groupchat.schemas.channel import ChannelCreate, ChannelOut
from groupchat.schemas.group import GroupCreate, GroupLeave, GroupMemberAdd, GroupOut
from groupchat.services import channel_service, membership_service
from groupchat.store import EntityStore

router = APIRouter()


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(payload: GroupCreate, store: EntityStore = Depends(get_store)):
    """Create a group. The creator owns it; every super admin is seated as admin."""
    with store.reading():
        return GroupOut.model_validate(membership_service.create_group(store, payload.name, payload.creator_id))


@router.get("/", response_model=list[GroupOut])
def list_groups(
    caller_id: Optional[str] = Query(None, description="Limit to this user's groups (super admins see all)"),
    store: EntityStore = Depends(get_store),
):
    return [GroupOut.model_validate(g) for g in membership_service.list_groups(store, caller_id)]


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: str, store: EntityStore = Depends(get_store)):
    with store.reading():
        return GroupOut.model_validate(membership_service.get_group(store, group_id))


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(group_id: str, admin_id: str = Query(...), store: EntityStore = Depends(get_store)):
    """Delete a group and all of its channels (owner or super admin)."""
    membership_service.delete_group(store, group_id, admin_id)


@router.post("/{group_id}/members", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def add_member(group_id: str, payload: GroupMemberAdd, store: EntityStore = Depends(get_store)):
    with store.reading():
        group = membership_service.add_member_to_group(store, group_id, payload.user_id, payload.admin_id)
        return GroupOut.model_validate(group)


@router.delete("/{group_id}/members/{user_id}", response_model=GroupOut)
def remove_member(
    group_id: str,
    user_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    """Remove a member; also clears their channel memberships and bans in this group."""
    with store.reading():
        group = membership_service.remove_member_from_group(store, group_id, user_id, admin_id)
        return GroupOut.model_validate(group)


@router.post("/{group_id}/leave", response_model=GroupOut)
def leave_group(group_id: str, payload: GroupLeave, store: EntityStore = Depends(get_store)):
    with store.reading():
        return GroupOut.model_validate(membership_service.leave_group(store, payload.user_id, group_id))


@router.get("/{group_id}/channels", response_model=list[ChannelOut])
def list_channels(group_id: str, caller_id: str = Query(...), store: EntityStore = Depends(get_store)):
    """Channels of the group visible to ``caller_id``."""
    channels = channel_service.list_channels(store, group_id, caller_id)
    return [ChannelOut.model_validate(c) for c in channels]


@router.post("/{group_id}/channels", response_model=ChannelOut, status_code=status.HTTP_201_CREATED)
def create_channel(group_id: str, payload: ChannelCreate, store: EntityStore = Depends(get_store)):
    with store.reading():
        channel = channel_service.create_channel(store, group_id, payload.name, payload.creator_id)
        return ChannelOut.model_validate(channel)
