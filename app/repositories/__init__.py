"""Repositories: the only layer that issues database queries."""

from app.repositories.posts import PostRepository
from app.repositories.todos import TodoRepository
from app.repositories.users import UserRepository

__all__ = ["PostRepository", "TodoRepository", "UserRepository"]
