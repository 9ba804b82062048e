"""Snapshot sinks: where the entity store's state goes after each mutation."""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from sqlalchemy.orm import sessionmaker

from groupchat.database import Base, SessionLocal, engine
from groupchat.models.snapshot import StateSnapshot

logger = logging.getLogger(__name__)


class SnapshotSink:
    """Interface: persist a full snapshot, and load the latest one at startup."""

    def persist(self, snapshot: dict[str, Any]) -> None:
        raise NotImplementedError

    def load(self) -> Optional[dict[str, Any]]:
        raise NotImplementedError


class MemorySnapshotSink(SnapshotSink):
    """Keeps every snapshot in a list. Used by tests and throwaway runs."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self.snapshots: list[dict[str, Any]] = [initial] if initial else []

    def persist(self, snapshot: dict[str, Any]) -> None:
        self.snapshots.append(snapshot)

    def load(self) -> Optional[dict[str, Any]]:
        return self.snapshots[-1] if self.snapshots else None


class JsonFileSnapshotSink(SnapshotSink):
    """Writes the whole state to one JSON file, replacing it atomically."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def persist(self, snapshot: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(snapshot, fh, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote snapshot to %s", self.path)

    def load(self) -> Optional[dict[str, Any]]:
        if not self.path.exists():
            logger.info("No snapshot at %s; starting empty", self.path)
            return None
        with self.path.open(encoding="utf-8") as fh:
            return json.load(fh)


class SqlSnapshotSink(SnapshotSink):
    """Appends each snapshot as a row in ``state_snapshots``; loads the newest."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def persist(self, snapshot: dict[str, Any]) -> None:
        session = self.session_factory()
        try:
            session.add(StateSnapshot(payload=snapshot))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def load(self) -> Optional[dict[str, Any]]:
        session = self.session_factory()
        try:
            row = session.query(StateSnapshot).order_by(StateSnapshot.snapshot_id.desc()).first()
            return row.payload if row else None
        finally:
            session.close()


def build_sink(config) -> SnapshotSink:
    """Pick the sink named by ``SNAPSHOT_BACKEND``."""
    backend = config.SNAPSHOT_BACKEND.lower()
    if backend == "json":
        return JsonFileSnapshotSink(config.DATA_FILE)
    if backend == "sql":
        if config.DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        return SqlSnapshotSink(SessionLocal)
    if backend == "memory":
        return MemorySnapshotSink()
    raise ValueError(f"Unknown SNAPSHOT_BACKEND: {config.SNAPSHOT_BACKEND!r}")
