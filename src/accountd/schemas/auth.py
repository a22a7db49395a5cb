"""Pydantic schemas for token issuance."""

from pydantic import BaseModel, Field


class AuthRequest(BaseModel):
    # Opaque to clients: an id that doesn't parse simply matches no user.
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
