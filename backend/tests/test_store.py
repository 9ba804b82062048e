"""Tests for the entity store, its transactions, and the snapshot sinks."""
import json
import logging
import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groupchat.database import Base
from groupchat.errors import Forbidden
from groupchat.models.group import Group
from groupchat.models.user import Role, User
from groupchat.services import channel_service, membership_service, user_service
from groupchat.sinks import (
    JsonFileSnapshotSink,
    MemorySnapshotSink,
    SnapshotSink,
    SqlSnapshotSink,
    build_sink,
)
from groupchat.store import EntityStore


class _BrokenSink(SnapshotSink):
    def persist(self, snapshot):
        raise OSError("disk full")

    def load(self):
        return None


class TestTransactions:
    def test_one_snapshot_per_mutation(self, store, sink, group_admin):
        membership_service.create_group(store, "G", group_admin.id)
        assert len(sink.snapshots) == 1
        assert sink.snapshots[0]["groups"][0]["name"] == "G"

    def test_failed_operation_not_persisted(self, store, sink, make_user):
        plain = make_user("plain")
        with pytest.raises(Forbidden):
            membership_service.create_group(store, "G", plain.id)
        assert sink.snapshots == []

    def test_nested_transactions_persist_once(self, store, sink):
        with store.transaction():
            with store.transaction():
                store.insert_user(User(username="a", password="pw"))
            assert sink.snapshots == []
        assert len(sink.snapshots) == 1

    def test_sink_failure_keeps_mutation(self, group_admin, caplog):
        store = EntityStore(sink=_BrokenSink())
        store.insert_user(group_admin)
        with caplog.at_level(logging.ERROR, logger="groupchat.store"):
            group = membership_service.create_group(store, "G", group_admin.id)
        assert store.find_group(group.id) is group
        assert "Snapshot write failed" in caplog.text


class TestSnapshots:
    def test_snapshot_uses_camel_case_keys(self, store, group_admin):
        membership_service.create_group(store, "G", group_admin.id)
        raw = store.snapshot()["groups"][0]
        assert raw["ownerId"] == group_admin.id
        assert raw["memberIds"] == [group_admin.id]
        assert raw["adminIds"] == [group_admin.id]

    def test_restore_round_trip(self, store, group_admin):
        group = membership_service.create_group(store, "G", group_admin.id)
        restored = EntityStore.from_snapshot(store.snapshot())
        assert restored.find_group_by_name("G").admin_ids == group.admin_ids
        assert restored.find_user_by_username("gadmin").has_role(Role.group_admin)

    def test_restore_translates_legacy_role_tags(self):
        data = {
            "users": [
                {"id": "1", "username": "super", "password": "123", "email": "", "roles": ["super", "super_admin"]},
                {"id": "2", "username": "ga", "password": "pw", "email": "", "roles": ["user", "groupAdmin"]},
            ],
        }
        store = EntityStore.from_snapshot(data)
        assert store.find_user("1").roles == [Role.user, Role.super_admin]
        assert store.find_user("2").roles == [Role.user, Role.group_admin]

    def test_restore_empty(self):
        assert EntityStore.from_snapshot(None).list_users() == []

    def test_duplicate_username_rejected(self, store):
        store.insert_user(User(username="a", password="pw"))
        with pytest.raises(ValueError):
            store.insert_user(User(username="a", password="pw"))


class TestSinks:
    def test_memory_sink(self):
        sink = MemorySnapshotSink()
        assert sink.load() is None
        sink.persist({"users": []})
        assert sink.load() == {"users": []}

    def test_json_file_sink(self, tmp_path):
        path = tmp_path / "nested" / "state.json"
        sink = JsonFileSnapshotSink(path)
        assert sink.load() is None
        sink.persist({"users": [], "groups": []})
        assert json.loads(path.read_text()) == {"users": [], "groups": []}
        assert sink.load() == {"users": [], "groups": []}
        assert [p.name for p in path.parent.iterdir()] == ["state.json"]

    def test_sql_sink_loads_latest(self):
        engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
        Base.metadata.create_all(bind=engine)
        sink = SqlSnapshotSink(sessionmaker(autocommit=False, autoflush=False, bind=engine))
        assert sink.load() is None
        sink.persist({"users": [], "version": 1})
        sink.persist({"users": [], "version": 2})
        assert sink.load()["version"] == 2
        engine.dispose()

    def test_store_survives_restart_through_json(self, tmp_path):
        sink = JsonFileSnapshotSink(tmp_path / "state.json")
        store = EntityStore(sink=sink)
        owner = store.insert_user(User(username="owner", password="pw", roles=["groupAdmin"]))
        membership_service.create_group(store, "G", owner.id)

        reloaded = EntityStore.from_snapshot(sink.load(), sink=sink)
        assert reloaded.find_group_by_name("G").owner_id == owner.id

    def test_build_sink(self, tmp_path):
        class Cfg:
            SNAPSHOT_BACKEND = "json"
            DATA_FILE = str(tmp_path / "s.json")
            DATABASE_URL = "sqlite://"

        assert isinstance(build_sink(Cfg), JsonFileSnapshotSink)
        Cfg.SNAPSHOT_BACKEND = "memory"
        assert isinstance(build_sink(Cfg), MemorySnapshotSink)
        Cfg.SNAPSHOT_BACKEND = "bogus"
        with pytest.raises(ValueError):
            build_sink(Cfg)


class TestIdleOperationsSkipSnapshots:
    def test_repeat_super_admin_promotion(self, store, sink, super_admin, make_user):
        other = make_user("other", Role.super_admin)
        _, changed = membership_service.promote_to_super_admin(store, other.id, super_admin.id)
        assert changed is False
        assert sink.snapshots == []

    def test_bootstrap_into_populated_store(self, store, sink, make_user):
        make_user("existing")
        assert user_service.bootstrap_super_admin(store, "super", "123") is None
        assert sink.snapshots == []

    def test_bootstrap_into_empty_store(self, store, sink):
        user_service.bootstrap_super_admin(store, "super", "123")
        assert len(sink.snapshots) == 1


class TestConcurrentReads:
    def test_listing_channels_while_they_are_created(self, store, group_admin, make_user):
        group = membership_service.create_group(store, "G", group_admin.id)
        member = make_user("member")
        membership_service.add_member_to_group(store, group.id, member.id, group_admin.id)
        errors = []

        def writer():
            try:
                for i in range(200):
                    channel_service.create_channel(store, group.id, f"c{i}", group_admin.id)
            except Exception as exc:
                errors.append(exc)

        thread = threading.Thread(target=writer)
        thread.start()
        counts = []
        while thread.is_alive():
            counts.append(len(channel_service.list_channels(store, group.id, group_admin.id)))
        thread.join()

        assert errors == []
        assert counts == sorted(counts)
        assert len(channel_service.list_channels(store, group.id, group_admin.id)) == 200

    def test_reader_never_sees_half_purged_user(self, store, super_admin, make_user):
        victim = make_user("victim")
        for i in range(500):
            store.insert_group(Group(
                name=f"G{i}",
                owner_id=super_admin.id,
                member_ids=[super_admin.id, victim.id],
                admin_ids=[super_admin.id],
            ))
        seen = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                groups = membership_service.list_groups(store)
                seen.append(sum(1 for g in groups if g.is_member(victim.id)))

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            membership_service.remove_user(store, victim.id, super_admin.id)
        finally:
            done.set()
            thread.join()

        assert set(seen) <= {0, 500}
        assert all(not g.is_member(victim.id) for g in membership_service.list_groups(store))

    def test_listed_groups_are_detached(self, store, group_admin, make_user):
        group = membership_service.create_group(store, "G", group_admin.id)
        listed = membership_service.list_groups(store)[0]
        late = make_user("late")
        membership_service.add_member_to_group(store, group.id, late.id, group_admin.id)
        assert late.id not in listed.member_ids
        assert late.id in group.member_ids
