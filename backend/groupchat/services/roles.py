"""Role evaluator: pure capability checks.

Every authorization decision in the services goes through these predicates;
nothing else compares role tags directly.
"""
from typing import Iterable

from groupchat.models.channel import Channel
from groupchat.models.group import Group
from groupchat.models.user import Role, User


def is_super_admin(user: User) -> bool:
    return user.has_role(Role.super_admin)


def is_global_group_admin(user: User) -> bool:
    return user.has_role(Role.group_admin)


def is_group_admin(user: User, group: Group) -> bool:
    """Super admins administer every group; others need a seat in ``admin_ids``."""
    return is_super_admin(user) or group.is_admin(user.id)


def is_group_owner(user: User, group: Group) -> bool:
    return group.owner_id == user.id


def can_manage_channel(user: User, group: Group) -> bool:
    return is_group_admin(user, group)


def can_view_channel(user: User, group: Group, channel: Channel) -> bool:
    """Admins see every channel; others only channels they belong to and are not banned from."""
    if is_group_admin(user, group):
        return True
    return channel.is_member(user.id) and not channel.is_banned(user.id)


def super_admins(users: Iterable[User]) -> list[User]:
    return [u for u in users if is_super_admin(u)]
