"""Tests for the role evaluator and role-tag translation."""
import pytest

from groupchat.models.channel import Channel
from groupchat.models.group import Group
from groupchat.models.user import Role, User, parse_role, roles_to_wire
from groupchat.services import roles


def _user(*tags, uid="u1"):
    return User(id=uid, username=uid, password="pw", roles=list(tags))


class TestRoleTags:
    """Legacy wire tags fold into the canonical roles."""

    @pytest.mark.parametrize("tag,expected", [
        ("user", Role.user),
        ("group_admin", Role.group_admin),
        ("groupAdmin", Role.group_admin),
        ("super", Role.super_admin),
        ("super_admin", Role.super_admin),
    ])
    def test_parse_role(self, tag, expected):
        assert parse_role(tag) is expected

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError):
            parse_role("owner")

    def test_alias_pairs_collapse_to_one_role(self):
        user = _user("super", "super_admin", "groupAdmin", "group_admin")
        assert user.roles == [Role.user, Role.super_admin, Role.group_admin]

    def test_user_role_always_present(self):
        assert _user().roles == [Role.user]
        assert Role.user in _user("super").roles

    def test_revoke_never_drops_base_role(self):
        user = _user("group_admin")
        assert user.revoke(Role.user) is False
        assert user.revoke(Role.group_admin) is True
        assert user.roles == [Role.user]

    def test_wire_output_canonical(self):
        assert roles_to_wire([Role.user, Role.super_admin]) == ["user", "super_admin"]

    def test_wire_output_legacy(self):
        tags = roles_to_wire([Role.user, Role.group_admin, Role.super_admin], legacy=True)
        assert tags == ["user", "group_admin", "groupAdmin", "super", "super_admin"]


class TestPredicates:
    def test_super_admin_from_either_tag(self):
        assert roles.is_super_admin(_user("super"))
        assert roles.is_super_admin(_user("super_admin"))
        assert not roles.is_super_admin(_user("group_admin"))

    def test_global_group_admin_from_either_tag(self):
        assert roles.is_global_group_admin(_user("groupAdmin"))
        assert roles.is_global_group_admin(_user("group_admin"))
        assert not roles.is_global_group_admin(_user())

    def test_group_admin_is_scoped_or_super(self):
        group = Group(name="g", owner_id="owner", member_ids=["owner", "u1"], admin_ids=["owner"])
        plain = _user(uid="u1")
        assert not roles.is_group_admin(plain, group)
        group.add_admin("u1")
        assert roles.is_group_admin(plain, group)
        assert roles.is_group_admin(_user("super", uid="s1"), group)

    def test_global_role_alone_does_not_grant_group_admin(self):
        group = Group(name="g", owner_id="owner", member_ids=["owner"], admin_ids=["owner"])
        assert not roles.is_group_admin(_user("group_admin", uid="ga"), group)

    def test_owner(self):
        group = Group(name="g", owner_id="owner")
        assert roles.is_group_owner(_user(uid="owner"), group)
        assert not roles.is_group_owner(_user(uid="other"), group)

    def test_can_manage_channel_matches_group_admin(self):
        group = Group(name="g", owner_id="o", member_ids=["o"], admin_ids=["o"])
        assert roles.can_manage_channel(_user(uid="o"), group)
        assert not roles.can_manage_channel(_user(uid="x"), group)

    def test_banned_member_cannot_view_channel(self):
        group = Group(name="g", owner_id="o", member_ids=["o", "u1"], admin_ids=["o"])
        channel = Channel(name="c", group_id=group.id, creator_id="o", member_ids=["o", "u1"])
        user = _user(uid="u1")
        assert roles.can_view_channel(user, group, channel)
        channel.ban("u1")
        assert not roles.can_view_channel(user, group, channel)
        assert roles.can_view_channel(_user(uid="o"), group, channel)

    def test_super_admins_filter(self):
        users = [_user(uid="a"), _user("super", uid="b"), _user("group_admin", uid="c")]
        assert [u.id for u in roles.super_admins(users)] == ["b"]
