from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ..repositories import Repository
from ..schemas import TodoCreate, TodoOut, TodoUpdate
from ..services import TodoService

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    Return the process-wide repository created during application startup.
    """
    return request.app.state.repository


def _get_service(repo: Repository = Depends(get_repository)) -> TodoService:
    """
    Dependency wrapper building the service around the shared repository.
    """
    return TodoService(repo)


def _out(item: Optional[dict]) -> Optional[TodoOut]:
    return None if item is None else TodoOut(**item)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List todos with an optional filter and sorting.\n\n"
        "Query parameters:\n"
        "- sortBy: one of description, createdAt, completed, priority\n"
        "- order: ASC (default) or DESC, only used with sortBy\n"
        "- completed: when given, only todos with this completion status are returned\n\n"
        "Without parameters every todo is returned in storage order."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Invalid sortBy or order"},
        503: {"description": "Storage unavailable"},
    },
)
def list_todos(
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Field to sort by"),
    order: Optional[str] = Query(None, description="Sort direction: 'ASC' or 'DESC'"),
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    svc: TodoService = Depends(_get_service),
) -> List[TodoOut]:
    """
    List todos, optionally filtered by completion and sorted.
    """
    return [TodoOut(**it) for it in svc.list(sort_by=sort_by, order=order, completed=completed)]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a new Todo item and return it with its generated id. "
        "createdAt defaults to now, completed to false and priority to 1."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, svc: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Create a new Todo.
    """
    return TodoOut(**svc.create(payload))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: str, svc: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**svc.get(todo_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=Optional[TodoOut],
    summary="Update Todo",
    description=(
        "Replace the description and priority of a Todo item. A missing or non-positive "
        "priority is stored as 1. Returns null when no Todo has this ID."
    ),
    responses={200: {"description": "Updated Todo, or null if not found"}},
)
def update_todo(todo_id: str, payload: TodoUpdate, svc: TodoService = Depends(_get_service)) -> Optional[TodoOut]:
    """
    Update a Todo item's description and priority.
    """
    return _out(svc.update(todo_id, payload))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/complete",
    response_model=Optional[TodoOut],
    summary="Complete Todo",
    description="Mark a Todo item as completed. Returns null when no Todo has this ID.",
    responses={200: {"description": "Completed Todo, or null if not found"}},
)
def complete_todo(todo_id: str, svc: TodoService = Depends(_get_service)) -> Optional[TodoOut]:
    """
    Mark a Todo item as completed, leaving other fields untouched.
    """
    return _out(svc.complete(todo_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=bool,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Returns true if a Todo was removed, false otherwise.",
    responses={200: {"description": "Whether a Todo was deleted"}},
)
def delete_todo(todo_id: str, svc: TodoService = Depends(_get_service)) -> bool:
    """
    Delete a Todo.
    """
    return svc.delete(todo_id)
