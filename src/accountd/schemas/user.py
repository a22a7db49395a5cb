"""Pydantic schemas for users.

Learn: Users are exposed read-only as JSON:API resources of type "users"
with name and role. Password hashes never leave the service; the only
place a password is returned is the seeding response, once.
"""

import uuid
from typing import Literal

from pydantic import BaseModel

from accountd.db.models import User

Role = Literal["user", "admin"]


class UserAttributes(BaseModel):
    name: str
    role: Role


class UserResource(BaseModel):
    type: Literal["users"] = "users"
    id: uuid.UUID
    attributes: UserAttributes

    @classmethod
    def from_model(cls, user: User) -> "UserResource":
        return cls(id=user.id, attributes=UserAttributes(name=user.name, role=user.role))


class UserListDocument(BaseModel):
    data: list[UserResource]


class SeededUser(BaseModel):
    """A freshly seeded user with its generated password."""

    id: uuid.UUID
    name: str
    role: Role
    password: str


class SetupResponse(BaseModel):
    message: str
    users: list[SeededUser]
