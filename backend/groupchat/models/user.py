"""User entity and the canonical role tags."""
import enum
from typing import Iterable

from pydantic import Field, field_validator

from groupchat.models.base import Entity, new_id


class Role(str, enum.Enum):
    user = "user"
    group_admin = "group_admin"
    super_admin = "super_admin"


# Older clients and state files carry two spellings for each elevated role.
_WIRE_TAGS = {
    "user": Role.user,
    "group_admin": Role.group_admin,
    "groupAdmin": Role.group_admin,
    "super_admin": Role.super_admin,
    "super": Role.super_admin,
}

_LEGACY_ALIASES = {
    Role.group_admin: ("group_admin", "groupAdmin"),
    Role.super_admin: ("super", "super_admin"),
}


def parse_role(tag) -> Role:
    """Translate a wire tag (canonical or legacy) into a Role."""
    if isinstance(tag, Role):
        return tag
    try:
        return _WIRE_TAGS[tag]
    except KeyError:
        raise ValueError(f"Unknown role tag: {tag!r}") from None


def roles_to_wire(roles: Iterable[Role], legacy: bool = False) -> list[str]:
    """Render roles for output, optionally expanding the legacy alias pairs."""
    tags: list[str] = []
    for role in roles:
        aliases = _LEGACY_ALIASES.get(role, (role.value,)) if legacy else (role.value,)
        for tag in aliases:
            if tag not in tags:
                tags.append(tag)
    return tags


class User(Entity):
    id: str = Field(default_factory=new_id)
    username: str
    password: str
    email: str = ""
    roles: list[Role] = Field(default_factory=lambda: [Role.user])

    @field_validator("roles", mode="before")
    @classmethod
    def _normalize_roles(cls, value):
        roles: list[Role] = [Role.user]
        for tag in value or []:
            role = parse_role(tag)
            if role not in roles:
                roles.append(role)
        return roles

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def grant(self, role: Role) -> bool:
        if role in self.roles:
            return False
        self.roles.append(role)
        return True

    def revoke(self, role: Role) -> bool:
        # Everyone keeps the base tier
        if role is Role.user or role not in self.roles:
            return False
        self.roles.remove(role)
        return True
