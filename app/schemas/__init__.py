"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccountSummary,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UpdateProfileRequest,
)
from app.schemas.common import ApiResponse, ErrorResponse, PaginationMeta
from app.schemas.health import HealthResponse
from app.schemas.posts import AttachmentOut, PostCreate, PostOut, PostUpdate
from app.schemas.todos import TodoCreate, TodoOut, TodoUpdate
from app.schemas.users import (
    AdminCreateUserRequest,
    OwnerSummary,
    TodoBrief,
    UpdateRoleRequest,
    UpdateStatusRequest,
    UserDetail,
    UserListItem,
    UserOut,
)

__all__ = [
    "AccountSummary",
    "AdminCreateUserRequest",
    "ApiResponse",
    "AttachmentOut",
    "ChangePasswordRequest",
    "CurrentUser",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "OwnerSummary",
    "PaginationMeta",
    "PostCreate",
    "PostOut",
    "PostUpdate",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TodoBrief",
    "TodoCreate",
    "TodoOut",
    "TodoUpdate",
    "TokenPair",
    "UpdateProfileRequest",
    "UpdateRoleRequest",
    "UpdateStatusRequest",
    "UserDetail",
    "UserListItem",
    "UserOut",
]
