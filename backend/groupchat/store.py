"""In-memory entity store.

Owns the five collections (users, groups, channels, interests, reports),
indexed by id and by unique natural key. The store does no authorization and
no cascading: services do that inside ``transaction()``, which holds the store
lock for the whole operation and hands the resulting state to the snapshot
sink once the outermost block exits cleanly.

Reads go through ``reading()``, which takes the same lock.

The in-memory state is canonical. A snapshot that fails to write is logged
and the mutation stands; a crash between a mutation and its snapshot loses
that mutation.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from groupchat.models.channel import Channel
from groupchat.models.group import Group
from groupchat.models.interest import GroupInterest
from groupchat.models.report import Report
from groupchat.models.user import User

logger = logging.getLogger(__name__)


class EntityStore:
    def __init__(self, sink=None):
        self.sink = sink
        self._lock = threading.RLock()
        self._depth = 0
        self._users: dict[str, User] = {}
        self._user_ids_by_name: dict[str, str] = {}
        self._groups: dict[str, Group] = {}
        self._group_ids_by_name: dict[str, str] = {}
        self._channels: dict[str, Channel] = {}
        self._interests: dict[str, GroupInterest] = {}
        self._reports: dict[str, Report] = {}

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator["EntityStore"]:
        """Run one operation atomically, then persist.

        Nested blocks join the outer one; only the outermost persists. If the
        block raises, nothing is persisted (services validate before mutating,
        so there is nothing to undo).
        """
        with self._lock:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            if self._depth == 0:
                self.persist()

    @contextmanager
    def reading(self) -> Iterator["EntityStore"]:
        """Hold the store lock for a read; never persists.

        Anything built inside the block (copies, response models) reflects
        state between operations, never a cascade halfway through.
        """
        with self._lock:
            yield self

    def persist(self) -> None:
        if self.sink is None:
            return
        try:
            self.sink.persist(self.snapshot())
        except Exception:
            logger.exception("Snapshot write failed; in-memory state kept")

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def find_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_user_by_username(self, username: str) -> Optional[User]:
        user_id = self._user_ids_by_name.get(username)
        return self._users.get(user_id) if user_id else None

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def insert_user(self, user: User) -> User:
        if user.id in self._users or user.username in self._user_ids_by_name:
            raise ValueError(f"Duplicate user {user.id} / {user.username!r}")
        self._users[user.id] = user
        self._user_ids_by_name[user.username] = user.id
        return user

    def delete_user(self, user_id: str) -> Optional[User]:
        user = self._users.pop(user_id, None)
        if user:
            self._user_ids_by_name.pop(user.username, None)
        return user

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------
    def find_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def find_group_by_name(self, name: str) -> Optional[Group]:
        group_id = self._group_ids_by_name.get(name)
        return self._groups.get(group_id) if group_id else None

    def list_groups(self) -> list[Group]:
        return list(self._groups.values())

    def insert_group(self, group: Group) -> Group:
        if group.id in self._groups or group.name in self._group_ids_by_name:
            raise ValueError(f"Duplicate group {group.id} / {group.name!r}")
        self._groups[group.id] = group
        self._group_ids_by_name[group.name] = group.id
        return group

    def delete_group(self, group_id: str) -> Optional[Group]:
        group = self._groups.pop(group_id, None)
        if group:
            self._group_ids_by_name.pop(group.name, None)
        return group

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------
    def find_channel(self, channel_id: str) -> Optional[Channel]:
        return self._channels.get(channel_id)

    def find_channel_by_name(self, group_id: str, name: str) -> Optional[Channel]:
        for channel in self.list_channels_by_group(group_id):
            if channel.name == name:
                return channel
        return None

    def list_channels(self) -> list[Channel]:
        return list(self._channels.values())

    def list_channels_by_group(self, group_id: str) -> list[Channel]:
        return [c for c in self._channels.values() if c.group_id == group_id]

    def insert_channel(self, channel: Channel) -> Channel:
        if channel.id in self._channels:
            raise ValueError(f"Duplicate channel {channel.id}")
        self._channels[channel.id] = channel
        return channel

    def delete_channel(self, channel_id: str) -> Optional[Channel]:
        return self._channels.pop(channel_id, None)

    # ------------------------------------------------------------------
    # Interests
    # ------------------------------------------------------------------
    def find_interest(self, interest_id: str) -> Optional[GroupInterest]:
        return self._interests.get(interest_id)

    def find_interest_for(self, group_id: str, user_id: str) -> Optional[GroupInterest]:
        for interest in self._interests.values():
            if interest.group_id == group_id and interest.user_id == user_id:
                return interest
        return None

    def list_interests(self) -> list[GroupInterest]:
        return list(self._interests.values())

    def list_interests_by_group(self, group_id: str) -> list[GroupInterest]:
        return [i for i in self._interests.values() if i.group_id == group_id]

    def insert_interest(self, interest: GroupInterest) -> GroupInterest:
        if interest.id in self._interests:
            raise ValueError(f"Duplicate interest {interest.id}")
        self._interests[interest.id] = interest
        return interest

    def delete_interest(self, interest_id: str) -> Optional[GroupInterest]:
        return self._interests.pop(interest_id, None)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def list_reports(self) -> list[Report]:
        return list(self._reports.values())

    def insert_report(self, report: Report) -> Report:
        if report.id in self._reports:
            raise ValueError(f"Duplicate report {report.id}")
        self._reports[report.id] = report
        return report

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def snapshot(self) -> dict[str, Any]:
        """Full state as a JSON-safe dict."""
        with self._lock:
            return {
                "users": [u.to_snapshot() for u in self._users.values()],
                "groups": [g.to_snapshot() for g in self._groups.values()],
                "channels": [c.to_snapshot() for c in self._channels.values()],
                "interests": [i.to_snapshot() for i in self._interests.values()],
                "reports": [r.to_snapshot() for r in self._reports.values()],
            }

    @classmethod
    def from_snapshot(cls, data: Optional[dict[str, Any]], sink=None) -> "EntityStore":
        """Rebuild a store from ``snapshot()`` output. Missing sections are empty."""
        store = cls(sink=sink)
        data = data or {}
        for raw in data.get("users", []):
            store.insert_user(User.model_validate(raw))
        for raw in data.get("groups", []):
            store.insert_group(Group.model_validate(raw))
        for raw in data.get("channels", []):
            store.insert_channel(Channel.model_validate(raw))
        for raw in data.get("interests", []):
            store.insert_interest(GroupInterest.model_validate(raw))
        for raw in data.get("reports", []):
            store.insert_report(Report.model_validate(raw))
        logger.info(
            "Loaded %d users, %d groups, %d channels from snapshot",
            len(store._users), len(store._groups), len(store._channels),
        )
        return store
