#app/services/task_service.py
"""
Task service: validation of references, access checks, persistence calls and
response shaping for the task endpoints.

Existence is always resolved before permission, so an unknown id is a 404 and
a known id the caller may not touch is a 403.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core import permissions
from app.core.exceptions import TaskForbidden
from app.crud import task as crud_task
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentRead
from app.schemas.response import TaskListResponse
from app.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskRead,
    TaskDetail,
    TaskStats,
    StatusCount,
    PriorityCount,
)

logger = logging.getLogger("TaskTracker.TaskService")

# Поля запроса (TaskCreate/TaskUpdate) -> колонки модели
_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "category": "category_id",
    "assigned_to": "assigned_to_id",
    "due_date": "due_date",
    "tags": "tags",
}


def _to_model_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    data = {}
    for key, value in payload.items():
        column = _FIELD_MAP.get(key)
        if column is None:
            continue
        if hasattr(value, "value"):
            value = value.value
        data[column] = value
    return data


def list_tasks(
    db: Session,
    current_user: User,
    filters: Optional[Dict[str, Any]] = None,
    page: int = 1,
    limit: int = 10,
) -> TaskListResponse:
    """Page of tasks assigned to the caller."""
    filters = {k: (v.value if hasattr(v, "value") else v) for k, v in (filters or {}).items() if v is not None}
    logger.debug(f"Listing tasks for user {current_user.id}: filters={filters}, page={page}, limit={limit}")
    items, total = crud_task.get_tasks_page(
        db,
        assignee_id=current_user.id,
        filters=filters,
        page=page,
        limit=limit,
    )
    data = [TaskRead.model_validate(task) for task in items]
    return TaskListResponse(
        count=len(data),
        total=total,
        total_pages=math.ceil(total / limit) if total else 0,
        current_page=page,
        data=data,
    )


def get_task_detail(db: Session, current_user: User, task_id: int) -> TaskDetail:
    task = crud_task.get_task(db, task_id)
    permissions.ensure_can_read_task(current_user, task)
    return TaskDetail.model_validate(task)


def create_task(db: Session, current_user: User, payload: TaskCreate) -> TaskRead:
    """
    Create a task owned by the caller. Any client-supplied createdBy is dropped
    and the assignee defaults to the caller.
    """
    data = _to_model_fields(payload.model_dump())
    data["created_by_id"] = current_user.id
    if data.get("assigned_to_id") is None:
        data["assigned_to_id"] = current_user.id
    task = crud_task.create_task(db, data)
    return TaskRead.model_validate(task)


def update_task(db: Session, current_user: User, task_id: int, payload: TaskUpdate) -> TaskRead:
    task = crud_task.get_task(db, task_id)
    permissions.ensure_can_update_task(current_user, task)
    data = _to_model_fields(payload.model_dump(exclude_unset=True))
    task = crud_task.update_task(db, task, data)
    return TaskRead.model_validate(task)


def delete_task(db: Session, current_user: User, task_id: int) -> None:
    task = crud_task.get_task(db, task_id)
    permissions.ensure_can_delete_task(current_user, task)
    crud_task.delete_task(db, task)


def add_comment(db: Session, current_user: User, task_id: int, payload: CommentCreate) -> List[CommentRead]:
    """
    Append a comment and return the task's full comment thread.

    No read check here: any authenticated caller who knows the id may comment.
    """
    task = crud_task.get_task(db, task_id)
    if not permissions.can_comment_on_task(current_user, task):
        raise TaskForbidden("Not authorized to comment on this task")
    crud_task.append_comment(db, task, user_id=current_user.id, text=payload.text)
    return [CommentRead.model_validate(c) for c in crud_task.get_comments(db, task_id)]


def get_task_stats(db: Session, current_user: User) -> TaskStats:
    total = crud_task.count_tasks(db, current_user.id)
    by_status = [
        StatusCount(status=status, count=count)
        for status, count in crud_task.count_tasks_by_status(db, current_user.id)
    ]
    by_priority = [
        PriorityCount(priority=priority, count=count)
        for priority, count in crud_task.count_tasks_by_priority(db, current_user.id)
    ]
    return TaskStats(total=total, by_status=by_status, by_priority=by_priority)
