"""Channel entity."""
from pydantic import Field

from groupchat.models.base import Entity, add_unique, discard, new_id


class Channel(Entity):
    """A channel inside a group.

    Banning does not touch ``member_ids``; a banned member simply loses
    access until unbanned.
    """

    id: str = Field(default_factory=new_id)
    name: str
    group_id: str
    creator_id: str
    member_ids: list[str] = Field(default_factory=list)
    banned_user_ids: list[str] = Field(default_factory=list)

    def is_member(self, user_id: str) -> bool:
        return user_id in self.member_ids

    def is_banned(self, user_id: str) -> bool:
        return user_id in self.banned_user_ids

    def add_member(self, user_id: str) -> bool:
        return add_unique(self.member_ids, user_id)

    def remove_member(self, user_id: str) -> bool:
        return discard(self.member_ids, user_id)

    def ban(self, user_id: str) -> bool:
        return add_unique(self.banned_user_ids, user_id)

    def unban(self, user_id: str) -> bool:
        return discard(self.banned_user_ids, user_id)
