"""Account administration: admin-only listing, creation, role/status changes and deletion."""

import logging
from dataclasses import dataclass

from app.core.exceptions import ConflictError, NotFoundError
from app.core.permissions import ADMIN_ONLY, decide, decide_account_deletion, ensure_allowed
from app.core.security import hash_password
from app.models import AccountStatus, Role, Todo, User
from app.repositories.posts import PostRepository
from app.repositories.users import UserRepository
from app.schemas.users import AdminCreateUserRequest
from app.services.attachments import AttachmentStore
from app.services.pagination import Page, page_offset

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = "Admin access required"


@dataclass(frozen=True)
class AccountListing:
    user: User
    todo_count: int


@dataclass(frozen=True)
class AccountDetail:
    user: User
    recent_todos: list[Todo]
    todo_count: int


class AccountAdminService:
    def __init__(
        self,
        users: UserRepository,
        posts: PostRepository,
        attachments: AttachmentStore,
        bcrypt_rounds: int,
    ) -> None:
        self._users = users
        self._posts = posts
        self._attachments = attachments
        self._rounds = bcrypt_rounds

    @staticmethod
    def _require_admin(actor_role: Role, actor_id: int) -> None:
        ensure_allowed(decide(actor_role, actor_id, required_roles=ADMIN_ONLY), ADMIN_REQUIRED)

    def _get_or_404(self, account_id: int) -> User:
        user = self._users.get(account_id)
        if user is None:
            raise NotFoundError("User")
        return user

    def list_accounts(
        self,
        actor_id: int,
        actor_role: Role,
        page: int,
        limit: int,
        role: Role | None = None,
        status: AccountStatus | None = None,
    ) -> Page[AccountListing]:
        self._require_admin(actor_role, actor_id)
        users, total = self._users.find_many(role, status, page_offset(page, limit), limit)
        counts = self._users.todo_counts([u.id for u in users])
        items = [AccountListing(user=u, todo_count=counts.get(u.id, 0)) for u in users]
        return Page(items=items, page=page, limit=limit, total=total)

    def get_account(self, account_id: int, actor_id: int, actor_role: Role) -> AccountDetail:
        self._require_admin(actor_role, actor_id)
        user = self._get_or_404(account_id)
        counts = self._users.todo_counts([user.id])
        return AccountDetail(
            user=user,
            recent_todos=self._users.recent_todos(user.id),
            todo_count=counts.get(user.id, 0),
        )

    def create_account(self, data: AdminCreateUserRequest, actor_id: int, actor_role: Role) -> User:
        """Admin-initiated creation with explicit role and status; duplicate email -> ConflictError."""
        self._require_admin(actor_role, actor_id)
        if self._users.get_by_email(data.email) is not None:
            raise ConflictError("Email already registered")
        user = User(
            email=data.email,
            password_hash=hash_password(data.password, self._rounds),
            name=data.name,
            phone=data.phone,
            birth_date=data.birth_date,
            role=data.role,
            status=data.status,
        )
        created = self._users.add(user)
        logger.info(
            "Account created by admin: user_id=%s role=%s status=%s admin_id=%s",
            created.id,
            created.role,
            created.status,
            actor_id,
        )
        return created

    def update_role(self, account_id: int, role: Role, actor_id: int, actor_role: Role) -> User:
        self._require_admin(actor_role, actor_id)
        user = self._get_or_404(account_id)
        user.role = role
        updated = self._users.save(user)
        logger.info("Role changed: user_id=%s role=%s admin_id=%s", account_id, role, actor_id)
        return updated

    def update_status(
        self, account_id: int, status: AccountStatus, actor_id: int, actor_role: Role
    ) -> User:
        """INACTIVE accounts cannot log in, refresh, or use existing access tokens."""
        self._require_admin(actor_role, actor_id)
        user = self._get_or_404(account_id)
        user.status = status
        updated = self._users.save(user)
        logger.info("Status changed: user_id=%s status=%s admin_id=%s", account_id, status, actor_id)
        return updated

    def delete_account(self, account_id: int, actor_id: int, actor_role: Role) -> None:
        """
        Delete an account with its todos, posts, attachment records and files.

        Deleting one's own account is refused with ForbiddenError before the
        target is even looked up.
        """
        message = "Cannot delete your own account" if account_id == actor_id else ADMIN_REQUIRED
        ensure_allowed(decide_account_deletion(actor_role, actor_id, account_id), message)
        user = self._get_or_404(account_id)
        for post_id in self._posts.ids_for_author(user.id):
            self._attachments.remove_resource_dir(post_id)
        self._users.delete(user)
        logger.info("Account deleted: user_id=%s admin_id=%s", account_id, actor_id)
