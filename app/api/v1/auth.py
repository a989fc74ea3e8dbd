"""Auth endpoints: first-admin setup, registration, login, token refresh, profile, logout."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentUserDep, get_auth_service
from app.schemas.auth import (
    AccountSummary,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPair,
    UpdateProfileRequest,
)
from app.schemas.common import ApiResponse
from app.schemas.users import UserOut
from app.services.auth import AuthService

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/setup-admin", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def setup_admin(body: RegisterRequest, auth: AuthServiceDep) -> ApiResponse[UserOut]:
    """
    Create the first ADMIN account. Only works while no admin exists; further
    admins are created through /users by an existing admin.
    """
    admin = auth.bootstrap_first_admin(body)
    return ApiResponse(message="Admin account created", data=UserOut.model_validate(admin))


@router.post("/register", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, auth: AuthServiceDep) -> ApiResponse[UserOut]:
    """Self-registration; the new account is an ACTIVE USER. Log in separately to get tokens."""
    user = auth.register(body)
    return ApiResponse(message="Registration successful", data=UserOut.model_validate(user))


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(body: LoginRequest, auth: AuthServiceDep) -> ApiResponse[LoginResponse]:
    """
    Authenticate with email and password; returns an access token (15 minutes)
    and a refresh token (7 days). Send the access token as: Bearer <access_token>
    """
    result = auth.authenticate(body.email, body.password)
    return ApiResponse(
        message="Login successful",
        data=LoginResponse(
            access_token=result.tokens.access_token,
            refresh_token=result.tokens.refresh_token,
            user=AccountSummary.model_validate(result.user),
        ),
    )


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
def refresh_token(body: RefreshTokenRequest, auth: AuthServiceDep) -> ApiResponse[TokenPair]:
    """Exchange a refresh token for a new pair. The presented refresh token stops working."""
    tokens = auth.refresh(body.refresh_token)
    return ApiResponse(
        message="Token refreshed",
        data=TokenPair(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
    )


@router.get("/profile", response_model=ApiResponse[UserOut])
def get_profile(current_user: CurrentUserDep, auth: AuthServiceDep) -> ApiResponse[UserOut]:
    return ApiResponse(data=UserOut.model_validate(auth.get_profile(current_user.id)))


@router.put("/profile", response_model=ApiResponse[UserOut])
def update_profile(
    body: UpdateProfileRequest,
    current_user: CurrentUserDep,
    auth: AuthServiceDep,
) -> ApiResponse[UserOut]:
    user = auth.update_profile(current_user.id, body)
    return ApiResponse(message="Profile updated", data=UserOut.model_validate(user))


@router.post("/change-password", response_model=ApiResponse[None])
def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUserDep,
    auth: AuthServiceDep,
) -> ApiResponse[None]:
    auth.change_password(current_user.id, body.current_password, body.new_password)
    return ApiResponse(message="Password changed")


@router.post("/logout", response_model=ApiResponse[None])
def logout(current_user: CurrentUserDep, auth: AuthServiceDep) -> ApiResponse[None]:
    """End the session: the stored refresh token is cleared. Access tokens run until they expire."""
    auth.logout(current_user.id)
    return ApiResponse(message="Logout successful")
