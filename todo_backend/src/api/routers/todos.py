from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..errors import TodoNotFoundError
from ..logger import get_logger
from ..repositories import TodoRepository, get_repository
from ..schemas import DeleteResult, ErrorOut, TodoIn, TodoOut

logger = get_logger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_VALIDATION_ERROR = {"model": ErrorOut, "description": "Description missing or malformed body"}
_NOT_FOUND = {"model": ErrorOut, "description": "Todo not found"}
_SERVER_ERROR = {"model": ErrorOut, "description": "Persistence failure"}


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the persisted record, including its generated todo_id.",
    responses={
        201: {"description": "Todo created successfully"},
        400: _VALIDATION_ERROR,
        500: _SERVER_ERROR,
    },
)
def create_todo(payload: TodoIn, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo.
    """
    created = repo.create(payload)
    logger.info("Created todo %s", created["todo_id"])
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item ordered by ascending todo_id.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: _SERVER_ERROR,
    },
)
def list_todos(repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    return [TodoOut(**it) for it in repo.list()]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Replace Todo",
    description=(
        "Replace the description and completion flag of an existing Todo item. "
        "An omitted `completed` is stored as false."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: _VALIDATION_ERROR,
        404: _NOT_FOUND,
        500: _SERVER_ERROR,
    },
)
def put_todo(todo_id: int, payload: TodoIn, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Full replace semantics: both fields are overwritten, nothing is merged.
    """
    updated = repo.update(todo_id, payload)
    if updated is None:
        raise TodoNotFoundError(todo_id)
    logger.info("Updated todo %s", todo_id)
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=DeleteResult,
    summary="Delete Todo",
    description="Delete a Todo item by ID and echo the removed record.",
    responses={
        200: {"description": "Todo deleted"},
        404: _NOT_FOUND,
        500: _SERVER_ERROR,
    },
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(get_repository)) -> DeleteResult:
    """
    Delete a Todo. Returns 200 with the removed record, 404 if not found.
    """
    deleted = repo.delete(todo_id)
    if deleted is None:
        raise TodoNotFoundError(todo_id)
    logger.info("Deleted todo %s", todo_id)
    return DeleteResult(message="Todo was deleted!", todo=TodoOut(**deleted))
