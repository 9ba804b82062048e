"""Membership engine: group lifecycle, global roles, and account removal.

Responsibilities:
- Authorization through the role evaluator only
- Cascades: super admins seeded into every group, global group-admin rights
  propagated into joined groups, channel state cleared on group departure,
  full purge on account deletion
- Every check runs before the first mutation, inside one store transaction
"""
import logging
from typing import Optional

from groupchat.errors import BadRequest, Conflict, Forbidden, Unauthorized
from groupchat.models.group import Group
from groupchat.models.user import Role, User
from groupchat.services import roles
from groupchat.services.lookup import get_group_or_404, get_user_or_404
from groupchat.store import EntityStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared cascades
# ---------------------------------------------------------------------------
def admit_member(store: EntityStore, group: Group, user: User) -> None:
    """Add ``user`` to ``group``; global group admins also get admin rights there."""
    group.add_member(user.id)
    if roles.is_global_group_admin(user):
        group.add_admin(user.id)
    interest = store.find_interest_for(group.id, user.id)
    if interest:
        store.delete_interest(interest.id)


def _expel(store: EntityStore, group: Group, user_id: str) -> None:
    """Drop ``user_id`` from the group and reset their state in its channels."""
    group.remove_member(user_id)
    for channel in store.list_channels_by_group(group.id):
        channel.remove_member(user_id)
        channel.unban(user_id)


def _purge_user(store: EntityStore, user: User) -> None:
    """Remove every trace of ``user`` from groups, channels, and pending interests."""
    for group in store.list_groups():
        group.remove_member(user.id)
    for channel in store.list_channels():
        channel.remove_member(user.id)
        channel.unban(user.id)
    for interest in store.list_interests():
        if interest.user_id == user.id:
            store.delete_interest(interest.id)
    store.delete_user(user.id)


def _require_super_admin(actor: User, action: str) -> None:
    if not roles.is_super_admin(actor):
        logger.warning("User %s denied: %s requires super admin", actor.id, action)
        raise Forbidden(f"Only a super admin may {action}")


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------
def create_group(store: EntityStore, name: str, creator_id: str) -> Group:
    """Create a group owned by ``creator_id`` with every super admin seated as admin."""
    name = (name or "").strip()
    with store.transaction():
        creator = get_user_or_404(store, creator_id, "Creator")
        if not name:
            raise BadRequest("Group name is required")
        if not (roles.is_global_group_admin(creator) or roles.is_super_admin(creator)):
            raise Forbidden("Only group admins or super admins may create groups")
        if store.find_group_by_name(name):
            raise Conflict(f"Group name '{name}' is already taken")

        group = Group(name=name, owner_id=creator.id, member_ids=[creator.id], admin_ids=[creator.id])
        for admin in roles.super_admins(store.list_users()):
            group.add_admin(admin.id)
        store.insert_group(group)
    logger.info("Created group '%s' (%s) by user %s", group.name, group.id, creator_id)
    return group


def delete_group(store: EntityStore, group_id: str, admin_id: str) -> None:
    """Delete a group together with its channels and pending join requests."""
    with store.transaction():
        group = get_group_or_404(store, group_id)
        admin = get_user_or_404(store, admin_id, "Admin")
        if not (roles.is_super_admin(admin) or roles.is_group_owner(admin, group)):
            raise Forbidden("Only the group owner or a super admin may delete this group")

        channels = store.list_channels_by_group(group.id)
        for channel in channels:
            store.delete_channel(channel.id)
        for interest in store.list_interests_by_group(group.id):
            store.delete_interest(interest.id)
        store.delete_group(group.id)
    logger.info("Deleted group %s and %d channels (by %s)", group_id, len(channels), admin_id)


def list_groups(store: EntityStore, caller_id: Optional[str] = None) -> list[Group]:
    """All groups, or only the caller's groups unless the caller is a super admin.

    Returns copies taken under the store lock.
    """
    with store.reading():
        groups = store.list_groups()
        if caller_id is not None:
            caller = get_user_or_404(store, caller_id, "Caller")
            if not roles.is_super_admin(caller):
                groups = [g for g in groups if g.is_member(caller.id)]
        return [g.model_copy(deep=True) for g in groups]


def get_group(store: EntityStore, group_id: str) -> Group:
    return get_group_or_404(store, group_id)


def add_member_to_group(store: EntityStore, group_id: str, user_id: str, admin_id: str) -> Group:
    with store.transaction():
        group = get_group_or_404(store, group_id)
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may add members")
        if group.is_member(user.id):
            raise Conflict("User is already a member of this group")
        admit_member(store, group, user)
    logger.info("Added user %s to group %s (by %s)", user_id, group_id, admin_id)
    return group


def remove_member_from_group(store: EntityStore, group_id: str, user_id: str, admin_id: str) -> Group:
    with store.transaction():
        group = get_group_or_404(store, group_id)
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may remove members")
        if roles.is_super_admin(user) and not roles.is_super_admin(admin):
            logger.warning("Group admin %s tried to remove super admin %s from %s", admin_id, user_id, group_id)
            raise Forbidden("Super admins can only be removed by another super admin")
        if not group.is_member(user.id):
            raise BadRequest("User is not a member of this group")
        _expel(store, group, user.id)
    logger.info("Removed user %s from group %s (by %s)", user_id, group_id, admin_id)
    return group


def leave_group(store: EntityStore, user_id: str, group_id: str) -> Group:
    """Self-service departure. Anyone may leave, super admins included."""
    with store.transaction():
        group = get_group_or_404(store, group_id)
        user = get_user_or_404(store, user_id)
        if not group.is_member(user.id):
            raise BadRequest("User is not a member of this group")
        _expel(store, group, user.id)
    logger.info("User %s left group %s", user_id, group_id)
    return group


# ---------------------------------------------------------------------------
# Global roles
# ---------------------------------------------------------------------------
def promote_to_group_admin(store: EntityStore, user_id: str, admin_id: str) -> User:
    """Grant the global group-admin role and admin rights in every group already joined."""
    with store.transaction():
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        _require_super_admin(admin, "grant group admin")

        user.grant(Role.group_admin)
        for group in store.list_groups():
            if group.is_member(user.id):
                group.add_admin(user.id)
    logger.info("Promoted user %s to group admin (by %s)", user_id, admin_id)
    return user


def demote_from_group_admin(store: EntityStore, user_id: str, admin_id: str) -> User:
    """Revoke the global group-admin role and admin rights everywhere; memberships stay.

    A super admin target loses the tag but keeps their admin seats, since
    super admins administer every group regardless.
    """
    with store.transaction():
        admin = get_user_or_404(store, admin_id, "Admin")
        user = get_user_or_404(store, user_id)
        _require_super_admin(admin, "revoke group admin")

        user.revoke(Role.group_admin)
        if not roles.is_super_admin(user):
            for group in store.list_groups():
                group.remove_admin(user.id)
    logger.info("Demoted user %s from group admin (by %s)", user_id, admin_id)
    return user


def promote_to_super_admin(store: EntityStore, user_id: str, promoter_id: str) -> tuple[User, bool]:
    """Grant super admin and seat the user as admin in every existing group.

    Returns ``(user, changed)``; promoting an existing super admin is a no-op.
    """
    with store.reading():
        promoter = get_user_or_404(store, promoter_id, "Promoter")
        user = get_user_or_404(store, user_id)
        _require_super_admin(promoter, "grant super admin")

        if roles.is_super_admin(user):
            logger.info("User %s is already a super admin", user_id)
            return user, False

        with store.transaction():
            user.grant(Role.super_admin)
            for group in store.list_groups():
                group.add_admin(user.id)
    logger.info("Promoted user %s to super admin (by %s)", user_id, promoter_id)
    return user, True


# ---------------------------------------------------------------------------
# Account removal
# ---------------------------------------------------------------------------
def remove_user(store: EntityStore, user_id: str, admin_id: str) -> None:
    """Super-admin deletion of another account."""
    with store.transaction():
        admin = get_user_or_404(store, admin_id, "Admin")
        _require_super_admin(admin, "remove users")
        user = get_user_or_404(store, user_id)
        if user.id == admin.id:
            raise BadRequest("Use self-deletion to remove your own account")
        _purge_user(store, user)
    logger.info("Removed user %s (by %s)", user_id, admin_id)


def self_delete_user(store: EntityStore, user_id: str, password: str) -> None:
    """Delete one's own account after confirming the password."""
    with store.transaction():
        user = get_user_or_404(store, user_id)
        if user.password != password:
            logger.warning("Self-deletion for user %s rejected: bad password", user_id)
            raise Unauthorized("Password does not match")
        _purge_user(store, user)
    logger.info("User %s deleted their account", user_id)
