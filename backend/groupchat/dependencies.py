"""FastAPI dependencies shared by the routers."""
from fastapi import Request

from groupchat.store import EntityStore


def get_store(request: Request) -> EntityStore:
    """The process-wide entity store, created in the app lifespan."""
    return request.app.state.store
