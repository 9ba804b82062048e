"""Account registration, login, and read access to users."""
import logging

from groupchat.errors import BadRequest, Conflict, Unauthorized
from groupchat.models.user import Role, User
from groupchat.services.lookup import get_user_or_404
from groupchat.store import EntityStore

logger = logging.getLogger(__name__)


def register_user(store: EntityStore, username: str, password: str, email: str = "") -> User:
    """Create a regular user."""
    username = (username or "").strip()
    with store.transaction():
        if not username or not password:
            raise BadRequest("Username and password are required")
        if store.find_user_by_username(username):
            raise Conflict(f"Username '{username}' is already taken")
        user = store.insert_user(User(username=username, password=password, email=email or ""))
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def authenticate(store: EntityStore, username: str, password: str) -> User:
    user = store.find_user_by_username((username or "").strip())
    if not user or user.password != password:
        logger.warning("Failed login for username %r", username)
        raise Unauthorized("Those credentials do not match")
    return user


def list_users(store: EntityStore) -> list[User]:
    with store.reading():
        return [u.model_copy(deep=True) for u in store.list_users()]


def get_user(store: EntityStore, user_id: str) -> User:
    return get_user_or_404(store, user_id)


def bootstrap_super_admin(store: EntityStore, username: str, password: str, email: str = "") -> User | None:
    """Seed a super admin into an empty store so the system can be administered."""
    with store.reading():
        if store.list_users():
            return None
        with store.transaction():
            user = store.insert_user(User(
                username=username,
                password=password,
                email=email,
                roles=[Role.user, Role.group_admin, Role.super_admin],
            ))
    logger.info("Bootstrapped super admin '%s' (%s)", user.username, user.id)
    return user
