"""Todo CRUD with owner-or-admin authorization."""

import logging

from app.core.exceptions import NotFoundError
from app.core.permissions import decide, ensure_allowed, visible_owner_id
from app.models import Role, Todo
from app.repositories.todos import TodoRepository
from app.schemas.todos import TodoCreate, TodoUpdate
from app.services.pagination import Page, page_offset

logger = logging.getLogger(__name__)


class TodoService:
    def __init__(self, todos: TodoRepository) -> None:
        self._todos = todos

    def _load_authorized(self, todo_id: int, actor_id: int, actor_role: Role, action: str) -> Todo:
        todo = self._todos.get(todo_id)
        if todo is None:
            raise NotFoundError("Todo")
        ensure_allowed(
            decide(actor_role, actor_id, resource_owner_id=todo.owner_id),
            f"You can only {action} your own todos",
        )
        return todo

    def list_todos(
        self,
        actor_id: int,
        actor_role: Role,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> Page[Todo]:
        """ADMIN sees every todo, anyone else only their own."""
        search = (search or "").strip() or None
        todos, total = self._todos.find_many(
            visible_owner_id(actor_role, actor_id), page_offset(page, limit), limit, search
        )
        return Page(items=todos, page=page, limit=limit, total=total, search=search)

    def get_todo(self, todo_id: int, actor_id: int, actor_role: Role) -> Todo:
        return self._load_authorized(todo_id, actor_id, actor_role, "access")

    def create_todo(self, data: TodoCreate, actor_id: int) -> Todo:
        """The owner is always the creator; it cannot be set from the payload."""
        todo = self._todos.create(Todo(**data.model_dump(), user_id=actor_id))
        logger.info("Todo created: todo_id=%s user_id=%s", todo.id, actor_id)
        return todo

    def update_todo(self, todo_id: int, data: TodoUpdate, actor_id: int, actor_role: Role) -> Todo:
        todo = self._load_authorized(todo_id, actor_id, actor_role, "update")
        # Only description may be cleared with an explicit null.
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field == "description"
        }
        return self._todos.update(todo, changes)

    def delete_todo(self, todo_id: int, actor_id: int, actor_role: Role) -> None:
        todo = self._load_authorized(todo_id, actor_id, actor_role, "delete")
        self._todos.delete(todo)
        logger.info("Todo deleted: todo_id=%s actor_id=%s", todo_id, actor_id)
