"""Join-request workflow: register, list, approve, reject.

An interest exists only while pending. Approval and rejection both delete it;
no history is kept.
"""
import logging
from typing import Optional

from groupchat.errors import Conflict, Forbidden, NotFound
from groupchat.models.group import Group
from groupchat.models.interest import GroupInterest
from groupchat.services import roles
from groupchat.services.lookup import get_group_or_404, get_user_or_404
from groupchat.services.membership_service import admit_member
from groupchat.store import EntityStore

logger = logging.getLogger(__name__)


def _get_interest_or_404(store: EntityStore, group: Group, interest_id: str) -> GroupInterest:
    interest = store.find_interest(interest_id)
    if not interest or interest.group_id != group.id:
        raise NotFound("Interest not found")
    return interest


def register_interest(store: EntityStore, group_id: str, user_id: str) -> GroupInterest:
    with store.transaction():
        group = get_group_or_404(store, group_id)
        user = get_user_or_404(store, user_id)
        if group.is_member(user.id):
            raise Conflict("User is already a member of this group")
        if store.find_interest_for(group.id, user.id):
            raise Conflict("A join request for this group is already pending")
        interest = store.insert_interest(GroupInterest(group_id=group.id, user_id=user.id))
    logger.info("User %s requested to join group %s (interest %s)", user_id, group_id, interest.id)
    return interest


def list_interests(
    store: EntityStore,
    group_id: str,
    caller_id: Optional[str] = None,
    restrict: bool = False,
) -> list[GroupInterest]:
    """Pending join requests for a group.

    Open to any caller unless ``restrict`` is set, in which case the caller
    must administer the group.
    """
    with store.reading():
        group = get_group_or_404(store, group_id)
        if restrict:
            if caller_id is None:
                raise Forbidden("Only group admins may list join requests")
            caller = get_user_or_404(store, caller_id, "Caller")
            if not roles.is_group_admin(caller, group):
                raise Forbidden("Only group admins may list join requests")
        return [i.model_copy(deep=True) for i in store.list_interests_by_group(group.id)]


def approve_interest(store: EntityStore, group_id: str, interest_id: str, admin_id: str) -> Group:
    """Admit the requesting user and drop the request.

    If the user already joined some other way, the request is just dropped.
    """
    with store.transaction():
        group = get_group_or_404(store, group_id)
        admin = get_user_or_404(store, admin_id, "Admin")
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may approve join requests")
        interest = _get_interest_or_404(store, group, interest_id)
        user = get_user_or_404(store, interest.user_id)

        if group.is_member(user.id):
            store.delete_interest(interest.id)
            logger.info("Interest %s dropped: user %s already in group %s", interest_id, user.id, group_id)
            return group
        admit_member(store, group, user)
    logger.info("Approved interest %s: user %s joined group %s (by %s)", interest_id, user.id, group_id, admin_id)
    return group


def reject_interest(store: EntityStore, group_id: str, interest_id: str, admin_id: str) -> None:
    with store.transaction():
        group = get_group_or_404(store, group_id)
        admin = get_user_or_404(store, admin_id, "Admin")
        if not roles.is_group_admin(admin, group):
            raise Forbidden("Only group admins may reject join requests")
        interest = _get_interest_or_404(store, group, interest_id)
        store.delete_interest(interest.id)
    logger.info("Rejected interest %s for group %s (by %s)", interest_id, group_id, admin_id)
