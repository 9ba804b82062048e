"""Pydantic schemas for Users."""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

from groupchat.models.user import User, roles_to_wire


class UserCreate(BaseModel):
    username: str
    password: str
    email: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class SelfDeleteRequest(BaseModel):
    password: str


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    roles: list[str]

    @classmethod
    def from_user(cls, user: User, legacy_roles: bool = False) -> UserOut:
        """Build the public view; the password never leaves the server."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            roles=roles_to_wire(user.roles, legacy=legacy_roles),
        )


class PromotionOut(BaseModel):
    user: UserOut
    changed: bool
