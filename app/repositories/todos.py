"""Persistence for todo items."""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.models import Todo


class TodoRepository:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, todo_id: int) -> Todo | None:
        return (
            self._db.query(Todo)
            .options(joinedload(Todo.user))
            .filter(Todo.id == todo_id)
            .first()
        )

    def find_many(
        self,
        owner_id: int | None,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Todo], int]:
        """Newest first; owner_id=None lists every owner's todos."""
        query = self._db.query(Todo)
        if owner_id is not None:
            query = query.filter(Todo.user_id == owner_id)
        if search:
            query = query.filter(
                or_(
                    Todo.title.icontains(search, autoescape=True),
                    Todo.description.icontains(search, autoescape=True),
                )
            )
        total = query.count()
        todos = (
            query.options(joinedload(Todo.user))
            .order_by(Todo.created_at.desc(), Todo.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return todos, total

    def create(self, todo: Todo) -> Todo:
        self._db.add(todo)
        self._db.commit()
        self._db.refresh(todo)
        return todo

    def update(self, todo: Todo, changes: dict[str, Any]) -> Todo:
        for field, value in changes.items():
            setattr(todo, field, value)
        self._db.commit()
        self._db.refresh(todo)
        return todo

    def delete(self, todo: Todo) -> None:
        self._db.delete(todo)
        self._db.commit()
