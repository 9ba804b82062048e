"""Channel operations: lifecycle, membership, bans, and visibility."""
import logging

from groupchat.errors import BadRequest, Conflict, Forbidden
from groupchat.models.channel import Channel
from groupchat.services import roles
from groupchat.services.lookup import (
    get_channel_or_404,
    get_group_or_404,
    get_parent_group_or_404,
    get_user_or_404,
)
from groupchat.store import EntityStore

logger = logging.getLogger(__name__)


def create_channel(store: EntityStore, group_id: str, name: str, creator_id: str) -> Channel:
    """Create a channel. Creator, group owner, and every super admin start as members."""
    name = (name or "").strip()
    with store.transaction():
        group = get_group_or_404(store, group_id)
        creator = get_user_or_404(store, creator_id, "Creator")
        if not name:
            raise BadRequest("Channel name is required")
        if not roles.can_manage_channel(creator, group):
            raise Forbidden("Only group admins may create channels")
        if store.find_channel_by_name(group.id, name):
            raise Conflict(f"Channel '{name}' already exists in this group")

        channel = Channel(name=name, group_id=group.id, creator_id=creator.id)
        channel.add_member(creator.id)
        if store.find_user(group.owner_id):
            channel.add_member(group.owner_id)
        for admin in roles.super_admins(store.list_users()):
            channel.add_member(admin.id)
        store.insert_channel(channel)
    logger.info("Created channel '%s' (%s) in group %s by %s", name, channel.id, group_id, creator_id)
    return channel


def delete_channel(store: EntityStore, channel_id: str, admin_id: str) -> None:
    with store.transaction():
        channel = get_channel_or_404(store, channel_id)
        group = get_parent_group_or_404(store, channel)
        admin = get_user_or_404(store, admin_id, "Admin")
        if not roles.can_manage_channel(admin, group):
            raise Forbidden("Only group admins may delete channels")
        store.delete_channel(channel.id)
    logger.info("Deleted channel %s from group %s (by %s)", channel_id, group.id, admin_id)


def get_channel(store: EntityStore, channel_id: str) -> Channel:
    return get_channel_or_404(store, channel_id)


def list_channels(store: EntityStore, group_id: str, caller_id: str) -> list[Channel]:
    """Channels of a group visible to the caller.

    Group admins and super admins see every channel; everyone else sees the
    channels they are a member of and not banned from. Returns copies taken
    under the store lock.
    """
    with store.reading():
        group = get_group_or_404(store, group_id)
        caller = get_user_or_404(store, caller_id, "Caller")
        return [
            channel.model_copy(deep=True)
            for channel in store.list_channels_by_group(group.id)
            if roles.can_view_channel(caller, group, channel)
        ]


def add_member_to_channel(store: EntityStore, channel_id: str, user_id: str, admin_id: str) -> Channel:
    with store.transaction():
        channel = get_channel_or_404(store, channel_id)
        group = get_parent_group_or_404(store, channel)
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may add channel members")
        if not group.is_member(user.id):
            raise BadRequest("User must be a member of the group first")
        if channel.is_member(user.id):
            raise Conflict("User is already a member of this channel")
        channel.add_member(user.id)
    logger.info("Added user %s to channel %s (by %s)", user_id, channel_id, admin_id)
    return channel


def remove_member_from_channel(store: EntityStore, channel_id: str, user_id: str, admin_id: str) -> Channel:
    with store.transaction():
        channel = get_channel_or_404(store, channel_id)
        group = get_parent_group_or_404(store, channel)
        admin = get_user_or_404(store, admin_id, "Admin")
        get_user_or_404(store, user_id)
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may remove channel members")
        if not channel.is_member(user_id):
            raise BadRequest("User is not a member of this channel")
        channel.remove_member(user_id)
    logger.info("Removed user %s from channel %s (by %s)", user_id, channel_id, admin_id)
    return channel


def ban_from_channel(store: EntityStore, channel_id: str, user_id: str, admin_id: str) -> Channel:
    """Ban a user from a channel. Only the group owner may ban; super admins cannot be banned."""
    with store.transaction():
        channel = get_channel_or_404(store, channel_id)
        group = get_parent_group_or_404(store, channel)
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        if not roles.is_group_owner(admin, group):
            raise Forbidden("Only the group owner may ban users from channels")
        if roles.is_super_admin(user):
            logger.warning("User %s tried to ban super admin %s from channel %s", admin_id, user_id, channel_id)
            raise Forbidden("Super admins cannot be banned")
        if channel.is_banned(user.id):
            raise Conflict("User is already banned from this channel")
        channel.ban(user.id)
    logger.info("Banned user %s from channel %s (by %s)", user_id, channel_id, admin_id)
    return channel


def unban_from_channel(store: EntityStore, channel_id: str, user_id: str, admin_id: str) -> Channel:
    with store.transaction():
        channel = get_channel_or_404(store, channel_id)
        group = get_parent_group_or_404(store, channel)
        admin = get_user_or_404(store, admin_id, "Admin")
        get_user_or_404(store, user_id)
        if not roles.is_group_owner(admin, group):
            raise Forbidden("Only the group owner may unban users")
        if not channel.is_banned(user_id):
            raise BadRequest("User is not banned from this channel")
        channel.unban(user_id)
    logger.info("Unbanned user %s from channel %s (by %s)", user_id, channel_id, admin_id)
    return channel
