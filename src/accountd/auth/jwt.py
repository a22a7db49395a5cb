"""JWT token issuance and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
A token is valid for 12 hours by default and is verified by signature
and expiry alone: there is no revocation list and no refresh token.

The token carries the claims {id, name, role} as sub/name/role.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from accountd.config import Settings
from accountd.db.models import ROLES


class VerificationError(Exception):
    """Raised when a token fails verification."""


@dataclass(frozen=True)
class Claims:
    """Identity carried by a token."""

    id: str
    name: str
    role: str


class TokenService:
    """Issues and verifies signed, time-limited tokens.

    The secret is fixed for the lifetime of the service; create one per
    app from Settings.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=12),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(hours=settings.token_expire_hours),
        )

    def issue(self, claims: Claims, now: Optional[datetime] = None) -> str:
        """Sign claims into a token that expires ttl after `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": claims.id,
            "name": claims.name,
            "role": claims.role,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        """Verify a token and return its claims.

        Raises VerificationError on a bad signature, an expired token or a
        payload that doesn't carry valid claims.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise VerificationError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise VerificationError(f"Invalid token: {e}")

        name = payload.get("name")
        role = payload.get("role")
        if not isinstance(name, str) or role not in ROLES:
            raise VerificationError("Invalid token payload")
        return Claims(id=payload["sub"], name=name, role=role)
