"""Pytest fixtures: a fresh in-memory entity store for every test."""
import os

# Keep the app lifespan away from the real state file
os.environ.setdefault("SNAPSHOT_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from groupchat.dependencies import get_store
from groupchat.main import app
from groupchat.models.user import Role, User
from groupchat.sinks import MemorySnapshotSink
from groupchat.store import EntityStore


@pytest.fixture(scope="function")
def sink():
    return MemorySnapshotSink()


@pytest.fixture(scope="function")
def store(sink):
    return EntityStore(sink=sink)


@pytest.fixture(scope="function")
def client(store):
    """FastAPI TestClient with the store dependency overridden."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories: seed users straight into the store
# ---------------------------------------------------------------------------
@pytest.fixture
def make_user(store):
    """Return a factory ``make_user(name, *roles, password="pw")``."""
    def _make(username: str, *roles: Role, password: str = "pw") -> User:
        user = User(
            username=username,
            password=password,
            email=f"{username}@example.com",
            roles=[Role.user, *roles],
        )
        return store.insert_user(user)
    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("root", Role.super_admin)


@pytest.fixture
def group_admin(make_user):
    return make_user("gadmin", Role.group_admin)
