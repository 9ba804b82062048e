"""User API routes: registration, reads, role changes, and account removal."""
from fastapi import APIRouter, Depends, Query, status

from groupchat.config import settings
from groupchat.dependencies import get_store
from groupchat.schemas.user import PromotionOut, SelfDeleteRequest, UserCreate, UserOut
from groupchat.services import membership_service, user_service
from groupchat.store import EntityStore

router = APIRouter()


def _out(user) -> UserOut:
    return UserOut.from_user(user, legacy_roles=settings.EMIT_LEGACY_ROLE_TAGS)


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, store: EntityStore = Depends(get_store)):
    """Register a regular user."""
    with store.reading():
        return _out(user_service.register_user(store, payload.username, payload.password, payload.email or ""))


@router.get("/", response_model=list[UserOut])
def list_users(store: EntityStore = Depends(get_store)):
    return [_out(u) for u in user_service.list_users(store)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, store: EntityStore = Depends(get_store)):
    with store.reading():
        return _out(user_service.get_user(store, user_id))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: str,
    admin_id: str = Query(..., description="Super admin performing the removal"),
    store: EntityStore = Depends(get_store),
):
    """Delete another user's account and purge them from every group and channel."""
    membership_service.remove_user(store, user_id, admin_id)


@router.post("/{user_id}/delete-self", status_code=status.HTTP_204_NO_CONTENT)
def self_delete_user(user_id: str, payload: SelfDeleteRequest, store: EntityStore = Depends(get_store)):
    """Delete one's own account; the password must match."""
    membership_service.self_delete_user(store, user_id, payload.password)


@router.post("/{user_id}/promote-group-admin", response_model=UserOut)
def promote_to_group_admin(user_id: str, admin_id: str = Query(...), store: EntityStore = Depends(get_store)):
    with store.reading():
        return _out(membership_service.promote_to_group_admin(store, user_id, admin_id))


@router.post("/{user_id}/demote-group-admin", response_model=UserOut)
def demote_from_group_admin(
    user_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    with store.reading():
        return _out(membership_service.demote_from_group_admin(store, user_id, admin_id))


@router.post("/{user_id}/promote-super-admin", response_model=PromotionOut)
def promote_to_super_admin(
    user_id: str,
    promoter_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    """Grant super admin; repeating the call on a super admin reports ``changed: false``."""
    with store.reading():
        user, changed = membership_service.promote_to_super_admin(store, user_id, promoter_id)
        return PromotionOut(user=_out(user), changed=changed)
