"""Todo endpoints. Non-admins only ever see and touch their own todos."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import CurrentUserDep, PageParams, get_todo_service
from app.schemas.common import ApiResponse, PaginationMeta
from app.schemas.todos import TodoCreate, TodoOut, TodoUpdate
from app.services.todos import TodoService

router = APIRouter()

TodoServiceDep = Annotated[TodoService, Depends(get_todo_service)]


@router.get("", response_model=ApiResponse[list[TodoOut]])
def list_todos(
    current_user: CurrentUserDep,
    todos: TodoServiceDep,
    paging: Annotated[PageParams, Depends()],
    search: Annotated[str | None, Query(max_length=255, description="Matches title or description")] = None,
) -> ApiResponse[list[TodoOut]]:
    page = todos.list_todos(current_user.id, current_user.role, paging.page, paging.limit, search)
    return ApiResponse(
        data=[TodoOut.model_validate(todo) for todo in page.items],
        meta=PaginationMeta.from_page(page),
    )


@router.post("", response_model=ApiResponse[TodoOut], status_code=status.HTTP_201_CREATED)
def create_todo(body: TodoCreate, current_user: CurrentUserDep, todos: TodoServiceDep) -> ApiResponse[TodoOut]:
    todo = todos.create_todo(body, current_user.id)
    return ApiResponse(message="Todo created", data=TodoOut.model_validate(todo))


@router.get("/{todo_id}", response_model=ApiResponse[TodoOut])
def get_todo(todo_id: int, current_user: CurrentUserDep, todos: TodoServiceDep) -> ApiResponse[TodoOut]:
    todo = todos.get_todo(todo_id, current_user.id, current_user.role)
    return ApiResponse(data=TodoOut.model_validate(todo))


@router.put("/{todo_id}", response_model=ApiResponse[TodoOut])
def update_todo(
    todo_id: int,
    body: TodoUpdate,
    current_user: CurrentUserDep,
    todos: TodoServiceDep,
) -> ApiResponse[TodoOut]:
    todo = todos.update_todo(todo_id, body, current_user.id, current_user.role)
    return ApiResponse(message="Todo updated", data=TodoOut.model_validate(todo))


@router.delete("/{todo_id}", response_model=ApiResponse[None])
def delete_todo(todo_id: int, current_user: CurrentUserDep, todos: TodoServiceDep) -> ApiResponse[None]:
    todos.delete_todo(todo_id, current_user.id, current_user.role)
    return ApiResponse(message="Todo deleted")
