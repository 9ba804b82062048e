"""Lookups that fail with NotFound instead of returning None."""
from groupchat.errors import NotFound
from groupchat.models.channel import Channel
from groupchat.models.group import Group
from groupchat.models.user import User
from groupchat.store import EntityStore


def get_user_or_404(store: EntityStore, user_id: str, label: str = "User") -> User:
    user = store.find_user(user_id)
    if not user:
        raise NotFound(f"{label} not found")
    return user


def get_group_or_404(store: EntityStore, group_id: str) -> Group:
    group = store.find_group(group_id)
    if not group:
        raise NotFound("Group not found")
    return group


def get_channel_or_404(store: EntityStore, channel_id: str) -> Channel:
    channel = store.find_channel(channel_id)
    if not channel:
        raise NotFound("Channel not found")
    return channel


def get_parent_group_or_404(store: EntityStore, channel: Channel) -> Group:
    group = store.find_group(channel.group_id)
    if not group:
        raise NotFound("Parent group not found")
    return group
