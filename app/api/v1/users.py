"""Account administration endpoints (ADMIN only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import AdminUserDep, PageParams, get_account_service
from app.models import AccountStatus, Role
from app.schemas.common import ApiResponse, PaginationMeta
from app.schemas.users import (
    AdminCreateUserRequest,
    TodoBrief,
    UpdateRoleRequest,
    UpdateStatusRequest,
    UserDetail,
    UserListItem,
    UserOut,
)
from app.services.accounts import AccountAdminService

router = APIRouter()

AccountServiceDep = Annotated[AccountAdminService, Depends(get_account_service)]


@router.get("", response_model=ApiResponse[list[UserListItem]])
def list_users(
    admin: AdminUserDep,
    accounts: AccountServiceDep,
    paging: Annotated[PageParams, Depends()],
    role: Annotated[Role | None, Query()] = None,
    status_filter: Annotated[AccountStatus | None, Query(alias="status")] = None,
) -> ApiResponse[list[UserListItem]]:
    """List accounts, newest first, each with its todo count. Filter by role and/or status."""
    page = accounts.list_accounts(admin.id, admin.role, paging.page, paging.limit, role, status_filter)
    items = [
        UserListItem.model_validate(listing.user).model_copy(update={"todo_count": listing.todo_count})
        for listing in page.items
    ]
    return ApiResponse(data=items, meta=PaginationMeta.from_page(page))


@router.post("", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminCreateUserRequest,
    admin: AdminUserDep,
    accounts: AccountServiceDep,
) -> ApiResponse[UserOut]:
    user = accounts.create_account(body, admin.id, admin.role)
    return ApiResponse(message="User created", data=UserOut.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserDetail])
def get_user(user_id: int, admin: AdminUserDep, accounts: AccountServiceDep) -> ApiResponse[UserDetail]:
    detail = accounts.get_account(user_id, admin.id, admin.role)
    data = UserDetail.model_validate(detail.user).model_copy(
        update={
            "recent_todos": [TodoBrief.model_validate(todo) for todo in detail.recent_todos],
            "todo_count": detail.todo_count,
        }
    )
    return ApiResponse(data=data)


@router.patch("/{user_id}/role", response_model=ApiResponse[UserOut])
def update_user_role(
    user_id: int,
    body: UpdateRoleRequest,
    admin: AdminUserDep,
    accounts: AccountServiceDep,
) -> ApiResponse[UserOut]:
    user = accounts.update_role(user_id, body.role, admin.id, admin.role)
    return ApiResponse(message="User role updated", data=UserOut.model_validate(user))


@router.patch("/{user_id}/status", response_model=ApiResponse[UserOut])
def update_user_status(
    user_id: int,
    body: UpdateStatusRequest,
    admin: AdminUserDep,
    accounts: AccountServiceDep,
) -> ApiResponse[UserOut]:
    """Deactivated accounts are locked out immediately: login, refresh and existing access tokens fail."""
    user = accounts.update_status(user_id, body.status, admin.id, admin.role)
    return ApiResponse(message="User status updated", data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: int, admin: AdminUserDep, accounts: AccountServiceDep) -> ApiResponse[None]:
    """Delete an account with its todos, posts and attachments. Admins cannot delete themselves."""
    accounts.delete_account(user_id, admin.id, admin.role)
    return ApiResponse(message="User deleted")
