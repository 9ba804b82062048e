"""Login route. Credentials are compared as stored; there is no session token."""
from fastapi import APIRouter, Depends

from groupchat.config import settings
from groupchat.dependencies import get_store
from groupchat.schemas.user import LoginRequest, UserOut
from groupchat.services import user_service
from groupchat.store import EntityStore

router = APIRouter()


@router.post("/login", response_model=UserOut)
def login(payload: LoginRequest, store: EntityStore = Depends(get_store)):
    with store.reading():
        user = user_service.authenticate(store, payload.username, payload.password)
        return UserOut.from_user(user, legacy_roles=settings.EMIT_LEGACY_ROLE_TAGS)
