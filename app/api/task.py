#app/api/task.py
import logging
from enum import Enum
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional, Type

from app.core.exceptions import TaskValidationError
from app.core.settings import settings
from app.crud.task import id_in_range
from app.dependencies import get_db, get_current_active_user
from app.models.task import TaskStatus, TaskPriority
from app.models.user import User as UserModel
from app.schemas.comment import CommentCreate
from app.schemas.response import (
    ErrorResponse,
    MessageResponse,
    TaskListResponse,
    TaskResponse,
    TaskDetailResponse,
    CommentListResponse,
    TaskStatsResponse,
)
from app.schemas.task import TaskCreate, TaskUpdate
from app.services import task_service

logger = logging.getLogger("TaskTracker.TasksAPI")

router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        400: {"model": ErrorResponse},
    },
)

def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None

def _parse_enum(value: Optional[str], enum_cls: Type[Enum], field: str) -> Optional[str]:
    value = _blank_to_none(value)
    if value is None:
        return None
    allowed = [e.value for e in enum_cls]
    if value not in allowed:
        raise TaskValidationError(
            f"Invalid {field} filter.",
            errors=[{"field": field, "message": f"Must be one of: {', '.join(allowed)}"}],
        )
    return value

def _parse_id(value: Optional[str], field: str) -> Optional[int]:
    value = _blank_to_none(value)
    if value is None:
        return None
    if not value.isdecimal() or len(value) > 19 or not id_in_range(int(value)):
        raise TaskValidationError(
            f"Invalid {field} filter.",
            errors=[{"field": field, "message": "Must be an integer id"}],
        )
    return int(value)

@router.get("", response_model=TaskListResponse)
def list_tasks(
    task_status: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Tasks assigned to the current user, newest first, with filters and pagination.
    """
    filters = {
        "status": _parse_enum(task_status, TaskStatus, "status"),
        "priority": _parse_enum(priority, TaskPriority, "priority"),
        "category_id": _parse_id(category, "category"),
        "search": _blank_to_none(search),
    }
    return task_service.list_tasks(db, current_user, filters=filters, page=page, limit=limit)

@router.get("/stats", response_model=TaskStatsResponse)
def get_task_stats(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Counts of the current user's tasks by status and by priority.
    """
    return TaskStatsResponse(data=task_service.get_task_stats(db, current_user))

@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_one_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Get a task by id (assignee or creator only).
    """
    return TaskDetailResponse(data=task_service.get_task_detail(db, current_user, task_id))

@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_new_task(
    data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Create a task. The caller becomes the creator and, unless given, the assignee.
    """
    task = task_service.create_task(db, current_user, data)
    return TaskResponse(message="Task created successfully", data=task)

@router.put("/{task_id}", response_model=TaskResponse)
def update_one_task(
    task_id: int,
    data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Partially update a task (assignee or creator only).
    """
    task = task_service.update_task(db, current_user, task_id, data)
    return TaskResponse(message="Task updated successfully", data=task)

@router.delete("/{task_id}", response_model=MessageResponse)
def delete_one_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Delete a task and its comments (creator only).
    """
    task_service.delete_task(db, current_user, task_id)
    return MessageResponse(message="Task deleted successfully", data={})

@router.post("/{task_id}/comments", response_model=CommentListResponse)
def add_task_comment(
    task_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """
    Append a comment and return the whole comment thread.
    """
    comments = task_service.add_comment(db, current_user, task_id, data)
    return CommentListResponse(message="Comment added successfully", data=comments)
