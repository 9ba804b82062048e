"""Channel API routes: reads, deletion, membership, and bans."""
from fastapi import APIRouter, Depends, Query, status

from groupchat.dependencies import get_store
from groupchat.schemas.channel import ChannelMemberChange, ChannelOut
from groupchat.services import channel_service
from groupchat.store import EntityStore

router = APIRouter()


@router.get("/{channel_id}", response_model=ChannelOut)
def get_channel(channel_id: str, store: EntityStore = Depends(get_store)):
    with store.reading():
        return ChannelOut.model_validate(channel_service.get_channel(store, channel_id))


@router.delete("/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_channel(channel_id: str, admin_id: str = Query(...), store: EntityStore = Depends(get_store)):
    channel_service.delete_channel(store, channel_id, admin_id)


@router.post("/{channel_id}/members", response_model=ChannelOut, status_code=status.HTTP_201_CREATED)
def add_member(channel_id: str, payload: ChannelMemberChange, store: EntityStore = Depends(get_store)):
    with store.reading():
        channel = channel_service.add_member_to_channel(store, channel_id, payload.user_id, payload.admin_id)
        return ChannelOut.model_validate(channel)


@router.delete("/{channel_id}/members/{user_id}", response_model=ChannelOut)
def remove_member(
    channel_id: str,
    user_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    with store.reading():
        channel = channel_service.remove_member_from_channel(store, channel_id, user_id, admin_id)
        return ChannelOut.model_validate(channel)


@router.post("/{channel_id}/bans", response_model=ChannelOut, status_code=status.HTTP_201_CREATED)
def ban_user(channel_id: str, payload: ChannelMemberChange, store: EntityStore = Depends(get_store)):
    """Ban a user (group owner only)."""
    with store.reading():
        channel = channel_service.ban_from_channel(store, channel_id, payload.user_id, payload.admin_id)
        return ChannelOut.model_validate(channel)


@router.delete("/{channel_id}/bans/{user_id}", response_model=ChannelOut)
def unban_user(
    channel_id: str,
    user_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    with store.reading():
        channel = channel_service.unban_from_channel(store, channel_id, user_id, admin_id)
        return ChannelOut.model_validate(channel)
