"""Request/response schemas for auth endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from app.core.security import NAME_MAX_LEN, NAME_MIN_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import AccountStatus, Role


class RegisterRequest(BaseModel):
    """Registration fields (also used for first-admin setup)."""

    email: EmailStr = Field(..., description="Login email, unique across accounts")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    password_confirmation: str = Field(..., max_length=PASSWORD_MAX_LEN)
    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    phone: str | None = Field(default=None, max_length=32)
    birth_date: date | None = None

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.password_confirmation:
            raise ValueError("Passwords don't match")
        return self


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token from login or the last refresh")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    password_confirmation: str = Field(..., max_length=PASSWORD_MAX_LEN)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.password_confirmation:
            raise ValueError("Passwords don't match")
        return self


class UpdateProfileRequest(BaseModel):
    """Only supplied fields are changed."""

    name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    phone: str | None = Field(default=None, max_length=32)
    birth_date: date | None = None


class TokenPair(BaseModel):
    """JWT access and refresh tokens."""

    access_token: str = Field(..., description="JWT access token (15 minutes)")
    refresh_token: str = Field(..., description="JWT refresh token (7 days, single use)")
    token_type: str = Field(default="bearer", description="Token type")


class AccountSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: Role
    status: AccountStatus


class LoginResponse(TokenPair):
    user: AccountSummary


class CurrentUser(BaseModel):
    """Authenticated account (id, email, role) resolved from the access token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: Role
