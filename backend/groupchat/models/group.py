"""Group entity."""
from pydantic import Field

from groupchat.models.base import Entity, add_unique, discard, new_id


class Group(Entity):
    """A chat group.

    ``admin_ids`` is kept a subset of ``member_ids``: granting admin also
    grants membership, and removing a member also drops their admin rights.
    ``owner_id`` is the creator and never changes.
    """

    id: str = Field(default_factory=new_id)
    name: str
    owner_id: str
    member_ids: list[str] = Field(default_factory=list)
    admin_ids: list[str] = Field(default_factory=list)

    def is_member(self, user_id: str) -> bool:
        return user_id in self.member_ids

    def is_admin(self, user_id: str) -> bool:
        return user_id in self.admin_ids

    def add_member(self, user_id: str) -> bool:
        return add_unique(self.member_ids, user_id)

    def add_admin(self, user_id: str) -> bool:
        joined = add_unique(self.member_ids, user_id)
        promoted = add_unique(self.admin_ids, user_id)
        return joined or promoted

    def remove_admin(self, user_id: str) -> bool:
        return discard(self.admin_ids, user_id)

    def remove_member(self, user_id: str) -> bool:
        demoted = discard(self.admin_ids, user_id)
        left = discard(self.member_ids, user_id)
        return demoted or left
