"""Request-scoped dependencies: DB session, services and the authenticated caller."""

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.permissions import ADMIN_ONLY, Decision, decide
from app.core.tokens import TokenKind, TokenService
from app.repositories import PostRepository, TodoRepository, UserRepository
from app.schemas.auth import CurrentUser
from app.services.accounts import AccountAdminService
from app.services.attachments import AttachmentStore
from app.services.auth import AuthService
from app.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from app.services.posts import PostService
from app.services.todos import TodoService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a DB session from the application's Database and close it when done."""
    yield from request.app.state.database.session()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DbSession = Annotated[Session, Depends(get_db)]


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_attachment_store(settings: SettingsDep, db: DbSession) -> AttachmentStore:
    return AttachmentStore(Path(settings.UPLOAD_DIR), PostRepository(db))


def get_auth_service(
    settings: SettingsDep,
    db: DbSession,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(UserRepository(db), tokens, settings.BCRYPT_ROUNDS)


def get_account_service(
    settings: SettingsDep,
    db: DbSession,
    attachments: Annotated[AttachmentStore, Depends(get_attachment_store)],
) -> AccountAdminService:
    return AccountAdminService(UserRepository(db), PostRepository(db), attachments, settings.BCRYPT_ROUNDS)


def get_todo_service(db: DbSession) -> TodoService:
    return TodoService(TodoRepository(db))


def get_post_service(
    db: DbSession,
    attachments: Annotated[AttachmentStore, Depends(get_attachment_store)],
) -> PostService:
    return PostService(PostRepository(db), attachments)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DbSession,
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer access token for an existing ACTIVE
    account. Every failure is 401; role and status are read from the database
    so a role change or deactivation takes effect immediately.
    """
    if credentials is None:
        raise UnauthorizedError("Access token required")
    identity = tokens.verify(credentials.credentials, TokenKind.ACCESS)
    if identity is None:
        raise UnauthorizedError("Invalid or expired token")
    user = UserRepository(db).get(identity.account_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        logger.info("Rejected access token for inactive user_id=%s", user.id)
        raise UnauthorizedError("Account is inactive")
    return CurrentUser(id=user.id, email=user.email, role=user.role)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_admin(current_user: CurrentUserDep) -> CurrentUser:
    """Dependency: require an authenticated ADMIN. Raises 403 for other roles."""
    if decide(current_user.role, current_user.id, required_roles=ADMIN_ONLY) is not Decision.ALLOW:
        raise ForbiddenError("Admin access required")
    return current_user


AdminUserDep = Annotated[CurrentUser, Depends(require_admin)]


class PageParams:
    """Query parameters shared by list endpoints."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="1-based page number")] = DEFAULT_PAGE,
        limit: Annotated[int, Query(ge=1, le=MAX_LIMIT, description="Items per page")] = DEFAULT_LIMIT,
    ) -> None:
        self.page = page
        self.limit = limit
