"""Persistence for accounts, including the per-account refresh-token slot."""

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError
from app.models import AccountStatus, Role, Todo, User

RECENT_TODOS_LIMIT = 10


class UserRepository:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, user_id: int) -> User | None:
        return self._db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self._db.query(User).filter(User.email == email).first()

    def admin_exists(self) -> bool:
        return self._db.query(User.id).filter(User.role == Role.ADMIN).first() is not None

    def find_many(
        self,
        role: Role | None,
        status: AccountStatus | None,
        offset: int,
        limit: int,
    ) -> tuple[list[User], int]:
        query = self._db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        if status is not None:
            query = query.filter(User.status == status)
        total = query.count()
        users = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return users, total

    def todo_counts(self, user_ids: list[int]) -> dict[int, int]:
        if not user_ids:
            return {}
        rows = (
            self._db.query(Todo.user_id, func.count(Todo.id))
            .filter(Todo.user_id.in_(user_ids))
            .group_by(Todo.user_id)
            .all()
        )
        return {user_id: count for user_id, count in rows}

    def recent_todos(self, user_id: int, limit: int = RECENT_TODOS_LIMIT) -> list[Todo]:
        return (
            self._db.query(Todo)
            .filter(Todo.user_id == user_id)
            .order_by(Todo.created_at.desc(), Todo.id.desc())
            .limit(limit)
            .all()
        )

    def add(self, user: User) -> User:
        """Insert a new account; a duplicate email surfaces as ConflictError."""
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            raise ConflictError("Email already registered") from e
        self._db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self._db.commit()
        self._db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self._db.delete(user)
        self._db.commit()

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        """Overwrite (login) or clear (logout) the stored refresh token."""
        self._db.execute(update(User).where(User.id == user_id).values(refresh_token=token))
        self._db.commit()

    def rotate_refresh_token(self, user_id: int, presented: str, replacement: str) -> bool:
        """
        Compare-and-replace the stored refresh token in one conditional UPDATE.

        Returns False when the stored value no longer equals `presented` or the
        account is not ACTIVE; at most one of two racing rotations can succeed.
        """
        result = self._db.execute(
            update(User)
            .where(
                User.id == user_id,
                User.refresh_token == presented,
                User.status == AccountStatus.ACTIVE,
            )
            .values(refresh_token=replacement)
        )
        self._db.commit()
        return result.rowcount == 1
