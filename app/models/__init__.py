"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.post import Post, PostAttachment
from app.models.todo import Todo
from app.models.user import AccountStatus, Role, User

__all__ = ["AccountStatus", "Base", "Post", "PostAttachment", "Role", "Todo", "User"]
