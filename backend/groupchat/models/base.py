"""Shared pieces for the in-memory entity models."""
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_unique(ids: list[str], item: str) -> bool:
    """Append ``item`` unless present. Returns True if the list changed."""
    if item in ids:
        return False
    ids.append(item)
    return True


def discard(ids: list[str], item: str) -> bool:
    """Remove ``item`` if present. Returns True if the list changed."""
    if item not in ids:
        return False
    ids.remove(item)
    return True


class Entity(BaseModel):
    """Base for stored entities.

    Snapshots use camelCase keys (``ownerId``, ``memberIds``) so existing
    JSON state files keep loading; Python code uses the snake_case names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_snapshot(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
