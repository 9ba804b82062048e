"""Join-request routes, nested under a group."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from groupchat.config import settings
from groupchat.dependencies import get_store
from groupchat.schemas.group import GroupOut, InterestCreate, InterestOut
from groupchat.services import interest_service
from groupchat.store import EntityStore

router = APIRouter()


@router.post("/{group_id}/interests", response_model=InterestOut, status_code=status.HTTP_201_CREATED)
def register_interest(group_id: str, payload: InterestCreate, store: EntityStore = Depends(get_store)):
    with store.reading():
        return InterestOut.model_validate(interest_service.register_interest(store, group_id, payload.user_id))


@router.get("/{group_id}/interests", response_model=list[InterestOut])
def list_interests(
    group_id: str,
    caller_id: Optional[str] = Query(None),
    store: EntityStore = Depends(get_store),
):
    """Pending join requests. Open to anyone unless RESTRICT_INTEREST_LISTING is set."""
    interests = interest_service.list_interests(
        store, group_id, caller_id, restrict=settings.RESTRICT_INTEREST_LISTING,
    )
    return [InterestOut.model_validate(i) for i in interests]


@router.post("/{group_id}/interests/{interest_id}/approve", response_model=GroupOut)
def approve_interest(
    group_id: str,
    interest_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    with store.reading():
        return GroupOut.model_validate(interest_service.approve_interest(store, group_id, interest_id, admin_id))


@router.post("/{group_id}/interests/{interest_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
def reject_interest(
    group_id: str,
    interest_id: str,
    admin_id: str = Query(...),
    store: EntityStore = Depends(get_store),
):
    interest_service.reject_interest(store, group_id, interest_id, admin_id)
