"""Request/response schemas for accounts and account administration."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import AccountStatus, Role


class OwnerSummary(BaseModel):
    """Safe owner fields embedded in todos and posts."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserOut(BaseModel):
    """Account as returned to clients (never the password hash or refresh token)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    phone: str | None = None
    birth_date: date | None = None
    role: Role
    status: AccountStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserListItem(UserOut):
    todo_count: int = Field(default=0, ge=0)


class TodoBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    completed: bool
    created_at: datetime | None = None


class UserDetail(UserOut):
    """Admin view of one account: its most recent todos and total todo count."""

    recent_todos: list[TodoBrief] = Field(default_factory=list)
    todo_count: int = Field(default=0, ge=0)


class AdminCreateUserRequest(BaseModel):
    """Account created by an admin; role and status are explicit."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    phone: str | None = Field(default=None, max_length=32)
    birth_date: date | None = None
    role: Role = Role.USER
    status: AccountStatus = AccountStatus.ACTIVE


class UpdateRoleRequest(BaseModel):
    role: Role = Field(..., description="USER, MODERATOR or ADMIN")


class UpdateStatusRequest(BaseModel):
    status: AccountStatus = Field(..., description="ACTIVE or INACTIVE")
