"""
Account self-service: first-admin bootstrap, registration, login, the
refresh-token rotation protocol, logout, profile and password changes.

Session states per account: refresh_token NULL (no session) or set (active
session). Login overwrites, refresh rotates with a compare-and-replace, logout
clears. Access tokens are stateless and stay valid until they expire.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from app.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import hash_password, verify_password
from app.core.tokens import TokenIdentity, TokenKind, TokenService
from app.models import AccountStatus, Role, User
from app.repositories.users import UserRepository
from app.schemas.auth import RegisterRequest, UpdateProfileRequest

logger = logging.getLogger(__name__)

# Same message for unknown email and wrong password so accounts cannot be enumerated.
INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    tokens: IssuedTokens
    user: User


@lru_cache(maxsize=None)
def dummy_hash(rounds: int) -> str:
    """Hash checked when the email is unknown; built once per process so that path costs one checkpw."""
    return hash_password("not-a-real-password", rounds)


def identity_for(user: User) -> TokenIdentity:
    return TokenIdentity(account_id=user.id, email=user.email, role=Role(user.role))


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        bcrypt_rounds: int,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._rounds = bcrypt_rounds

    def _new_account(self, data: RegisterRequest, role: Role) -> User:
        return User(
            email=data.email,
            password_hash=hash_password(data.password, self._rounds),
            name=data.name,
            phone=data.phone,
            birth_date=data.birth_date,
            role=role,
            status=AccountStatus.ACTIVE,
        )

    def bootstrap_first_admin(self, data: RegisterRequest) -> User:
        """Create the first ACTIVE ADMIN. Only possible while no ADMIN account exists."""
        if self._users.admin_exists():
            raise ConflictError("Admin already exists. Use /api/users to create more admins.")
        if self._users.get_by_email(data.email) is not None:
            raise ConflictError("Email already registered")
        admin = self._users.add(self._new_account(data, Role.ADMIN))
        logger.info("First admin created: user_id=%s", admin.id)
        return admin

    def register(self, data: RegisterRequest) -> User:
        """Self-registration always creates an ACTIVE USER."""
        if self._users.get_by_email(data.email) is not None:
            raise ConflictError("Email already registered")
        user = self._users.add(self._new_account(data, Role.USER))
        logger.info("User registered: user_id=%s", user.id)
        return user

    def _issue_tokens(self, user: User) -> IssuedTokens:
        identity = identity_for(user)
        return IssuedTokens(
            access_token=self._tokens.issue_access_token(identity),
            refresh_token=self._tokens.issue_refresh_token(identity),
        )

    def authenticate(self, email: str, password: str) -> LoginResult:
        """
        Verify credentials and open a session, replacing any previous one.

        Unknown email and wrong password both raise UnauthorizedError with the
        same message; any login to an inactive account raises ForbiddenError.
        """
        user = self._users.get_by_email(email)
        if user is None:
            verify_password(password, dummy_hash(self._rounds))
            logger.info("Login failed: unknown email")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.info("Login refused: user_id=%s is inactive", user.id)
            raise ForbiddenError("Account is inactive")
        if not verify_password(password, user.password_hash):
            logger.info("Login failed: wrong password for user_id=%s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        tokens = self._issue_tokens(user)
        self._users.set_refresh_token(user.id, tokens.refresh_token)
        logger.info("Login succeeded: user_id=%s", user.id)
        return LoginResult(tokens=tokens, user=user)

    def refresh(self, refresh_token: str) -> IssuedTokens:
        """
        Exchange a refresh token for a new access/refresh pair (rotation).

        The presented token must verify, equal the stored value and belong to an
        ACTIVE account; otherwise UnauthorizedError and nothing changes.
        """
        identity = self._tokens.verify(refresh_token, TokenKind.REFRESH)
        if identity is None:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)
        user = self._users.get(identity.account_id)
        if user is None or user.refresh_token != refresh_token or not user.is_active:
            logger.warning("Refresh rejected: stale or revoked token for user_id=%s", identity.account_id)
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        tokens = self._issue_tokens(user)
        if not self._users.rotate_refresh_token(user.id, refresh_token, tokens.refresh_token):
            # Another refresh, a logout or a deactivation won the race.
            logger.warning("Refresh rejected: concurrent rotation for user_id=%s", user.id)
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)
        return tokens

    def logout(self, account_id: int) -> None:
        self._users.set_refresh_token(account_id, None)
        logger.info("Logout: user_id=%s", account_id)

    def get_profile(self, account_id: int) -> User:
        user = self._users.get(account_id)
        if user is None:
            raise NotFoundError("User")
        return user

    def update_profile(self, account_id: int, data: UpdateProfileRequest) -> User:
        user = self.get_profile(account_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        for field, value in changes.items():
            setattr(user, field, value)
        return self._users.save(user)

    def change_password(self, account_id: int, current_password: str, new_password: str) -> None:
        user = self.get_profile(account_id)
        if not verify_password(current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")
        user.password_hash = hash_password(new_password, self._rounds)
        self._users.save(user)
        logger.info("Password changed: user_id=%s", account_id)
