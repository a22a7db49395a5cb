"""Pydantic schemas for accounts.

Learn: Request bodies are plain JSON ({"name": ...}); responses are
JSON:API resources of type "accounts" whose only attribute is the name.
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field

from accountd.db.models import Account


class AccountWrite(BaseModel):
    """Body for create and update: only the name is accepted."""

    name: str = Field(..., min_length=1, max_length=255)


class AccountAttributes(BaseModel):
    name: str


class AccountResource(BaseModel):
    type: Literal["accounts"] = "accounts"
    id: uuid.UUID
    attributes: AccountAttributes

    @classmethod
    def from_model(cls, account: Account) -> "AccountResource":
        return cls(id=account.id, attributes=AccountAttributes(name=account.name))


class AccountDocument(BaseModel):
    data: AccountResource


class AccountListDocument(BaseModel):
    data: list[AccountResource]
