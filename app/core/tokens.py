"""
JWT issuance and verification for the dual-token session protocol.

Access tokens (15 minutes) authenticate API calls; refresh tokens (7 days)
are only exchanged at /auth/refresh-token. Each kind is signed with its own
secret and carries a "type" claim, so one can never stand in for the other.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import jwt

from app.models.user import Role

if TYPE_CHECKING:
    from app.core.config import Settings

ACCESS_TOKEN_LIFETIME = timedelta(minutes=15)
REFRESH_TOKEN_LIFETIME = timedelta(days=7)


class TokenKind(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenIdentity:
    """Claims carried by both token kinds."""

    account_id: int
    email: str
    role: Role


class TokenService:
    def __init__(self, access_secret: str, refresh_secret: str, algorithm: str = "HS256") -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Token secrets must be non-empty")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")
        self._secrets = {TokenKind.ACCESS: access_secret, TokenKind.REFRESH: refresh_secret}
        self._lifetimes = {
            TokenKind.ACCESS: ACCESS_TOKEN_LIFETIME,
            TokenKind.REFRESH: REFRESH_TOKEN_LIFETIME,
        }
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            settings.JWT_SECRET.get_secret_value(),
            settings.JWT_REFRESH_SECRET.get_secret_value(),
            settings.JWT_ALGORITHM,
        )

    def issue_access_token(self, identity: TokenIdentity, now: datetime | None = None) -> str:
        return self._issue(TokenKind.ACCESS, identity, now)

    def issue_refresh_token(self, identity: TokenIdentity, now: datetime | None = None) -> str:
        return self._issue(TokenKind.REFRESH, identity, now)

    def _issue(self, kind: TokenKind, identity: TokenIdentity, now: datetime | None) -> str:
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(identity.account_id),
            "email": identity.email,
            "role": identity.role.value,
            "type": kind.value,
            "iat": issued_at,
            "exp": issued_at + self._lifetimes[kind],
            # Unique per token so two tokens issued within the same second still differ.
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self._algorithm)

    def verify(self, token: str, kind: TokenKind) -> TokenIdentity | None:
        """
        Check signature, expiry and token kind.

        Returns the decoded identity, or None for any invalid token (malformed,
        expired, wrong secret, wrong kind, bad claims). Never raises.
        """
        if not isinstance(token, str) or not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError:
            return None
        if payload.get("type") != kind.value:
            return None
        try:
            return TokenIdentity(
                account_id=int(payload["sub"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            return None
