#app/crud/task.py
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func, or_, update
from app.models.task import Task, TaskStatus, TaskPriority
from app.models.comment import TaskComment
from app.models.category import Category
from app.crud.user import get_user
from app.core.exceptions import (
    TaskNotFound,
    TaskValidationError,
    StoreError,
)
import logging
from typing import List, Dict, Any, Optional, Tuple

logger = logging.getLogger("TaskTracker.Tasks")

# Границы INTEGER/BIGINT: за ними драйвер падает с OverflowError
SQL_INT_MIN = -(2 ** 63)
SQL_INT_MAX = 2 ** 63 - 1

UPDATABLE_FIELDS = [
    "title", "description", "status", "priority", "category_id",
    "assigned_to_id", "due_date", "tags",
]

def id_in_range(value: int) -> bool:
    return SQL_INT_MIN <= value <= SQL_INT_MAX

def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def _check_references(db: Session, data: dict) -> None:
    """
    Проверяет, что исполнитель и категория существуют (до любой записи в БД).
    """
    assignee_id = data.get("assigned_to_id")
    if assignee_id is not None and (not id_in_range(assignee_id) or get_user(db, assignee_id) is None):
        raise TaskValidationError(
            "Assigned user not found.",
            errors=[{"field": "assignedTo", "message": f"User {assignee_id} does not exist"}],
        )
    category_id = data.get("category_id")
    if category_id is not None and (not id_in_range(category_id) or db.get(Category, category_id) is None):
        raise TaskValidationError(
            "Category not found.",
            errors=[{"field": "category", "message": f"Category {category_id} does not exist"}],
        )

def _check_enums(data: dict) -> None:
    if "status" in data and data["status"] not in {s.value for s in TaskStatus}:
        raise TaskValidationError(f"Invalid status '{data['status']}'.")
    if "priority" in data and data["priority"] not in {p.value for p in TaskPriority}:
        raise TaskValidationError(f"Invalid priority '{data['priority']}'.")

def create_task(db: Session, data: dict) -> Task:
    """
    Создать новую задачу. created_by_id и assigned_to_id обязательны.
    """
    title = (data.get("title") or "").strip()
    if not title:
        raise TaskValidationError("Title is required.")
    if data.get("created_by_id") is None:
        raise TaskValidationError("Task creator is required.")
    if data.get("assigned_to_id") is None:
        raise TaskValidationError("Task assignee is required.")

    tags_data = data.get("tags") or []
    if not isinstance(tags_data, list) or not all(isinstance(tag, str) for tag in tags_data):
        raise TaskValidationError("Tags must be a list of strings.")

    fields = {
        "status": data.get("status", TaskStatus.TODO.value),
        "priority": data.get("priority", TaskPriority.MEDIUM.value),
    }
    _check_enums(fields)
    _check_references(db, data)

    task = Task(
        title=title,
        description=(data.get("description") or "").strip(),
        status=fields["status"],
        priority=fields["priority"],
        category_id=data.get("category_id"),
        assigned_to_id=data["assigned_to_id"],
        created_by_id=data["created_by_id"],
        due_date=data.get("due_date"),
        tags=list(tags_data),
    )
    db.add(task)
    try:
        db.commit()
        db.refresh(task)
        logger.info(f"Created task {task.id} (created_by={task.created_by_id}, assigned_to={task.assigned_to_id})")
        return task
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create task: {e}")
        raise StoreError("Database error while creating task.")

def get_task(db: Session, task_id: int) -> Task:
    """
    Получить задачу по ID (категория, исполнитель, автор и комментарии подгружаются сразу).
    """
    task = db.query(Task).filter(Task.id == task_id).first() if id_in_range(task_id) else None
    if not task:
        raise TaskNotFound("Task not found")
    return task

def get_tasks_page(
    db: Session,
    assignee_id: int,
    filters: Optional[Dict[str, Any]] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Task], int]:
    """
    Страница задач, назначенных пользователю, с фильтрами. Сортировка: сначала новые.
    Возвращает (задачи, общее количество под фильтром).
    """
    if page < 1:
        raise TaskValidationError("Page must be >= 1.")
    if limit < 1:
        raise TaskValidationError("Limit must be >= 1.")

    query = db.query(Task).filter(Task.assigned_to_id == assignee_id)
    filters = filters or {}

    if filters.get("status"):
        query = query.filter(Task.status == filters["status"])
    if filters.get("priority"):
        query = query.filter(Task.priority == filters["priority"])
    if filters.get("category_id") is not None:
        if not id_in_range(filters["category_id"]):
            raise TaskValidationError("Invalid category filter.")
        query = query.filter(Task.category_id == filters["category_id"])
    if filters.get("search"):
        val = f"%{_escape_like(filters['search'])}%"
        query = query.filter(
            or_(
                Task.title.ilike(val, escape="\\"),
                Task.description.ilike(val, escape="\\"),
            )
        )

    total = query.count()
    offset = (page - 1) * limit
    if offset >= total:
        return [], total
    items = (
        query.order_by(Task.created_at.desc(), Task.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return items, total

def count_tasks(db: Session, assignee_id: int) -> int:
    return db.query(func.count(Task.id)).filter(Task.assigned_to_id == assignee_id).scalar() or 0

def count_tasks_by_status(db: Session, assignee_id: int) -> List[Tuple[str, int]]:
    rows = (
        db.query(Task.status, func.count(Task.id))
        .filter(Task.assigned_to_id == assignee_id)
        .group_by(Task.status)
        .order_by(Task.status)
        .all()
    )
    return [(status, count) for status, count in rows]

def count_tasks_by_priority(db: Session, assignee_id: int) -> List[Tuple[str, int]]:
    rows = (
        db.query(Task.priority, func.count(Task.id))
        .filter(Task.assigned_to_id == assignee_id)
        .group_by(Task.priority)
        .order_by(Task.priority)
        .all()
    )
    return [(priority, count) for priority, count in rows]

def update_task(db: Session, task: Task, data: dict) -> Task:
    """
    Обновить задачу. created_by_id не меняется никогда.
    """
    data = {k: v for k, v in data.items() if k in UPDATABLE_FIELDS}
    if "title" in data:
        data["title"] = (data["title"] or "").strip()
        if not data["title"]:
            raise TaskValidationError("Task title is required.")
    if "description" in data and data["description"] is not None:
        data["description"] = data["description"].strip()
    if "assigned_to_id" in data and data["assigned_to_id"] is None:
        raise TaskValidationError("Task assignee is required.")
    if "tags" in data and data["tags"] is None:
        raise TaskValidationError("Tags must be a list of strings.")
    _check_enums(data)
    _check_references(db, data)

    pre_update = {field: getattr(task, field) for field in UPDATABLE_FIELDS}
    for field, value in data.items():
        setattr(task, field, value)
    task.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update task {task.id}: {e}")
        raise StoreError("Database error while updating task.")

    changes = {
        k: (pre_update[k], getattr(task, k))
        for k in UPDATABLE_FIELDS
        if pre_update[k] != getattr(task, k)
    }
    if changes:
        logger.info(f"Updated task {task.id} fields: {changes}")
    else:
        logger.info(f"Update called but no changes for task {task.id}")
    return task

def delete_task(db: Session, task: Task) -> None:
    """
    Удалить задачу вместе со всеми комментариями.
    """
    task_id = task.id
    db.delete(task)
    try:
        db.commit()
        logger.info(f"Deleted task {task_id}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete task {task_id}: {e}")
        raise StoreError("Database error while deleting task.")

def append_comment(db: Session, task: Task, user_id: int, text: str) -> TaskComment:
    """
    Добавить комментарий: отдельный INSERT + точечное обновление updated_at,
    документ задачи целиком не перезаписывается.
    """
    comment = TaskComment(task_id=task.id, user_id=user_id, text=text)
    db.add(comment)
    try:
        db.execute(
            update(Task)
            .where(Task.id == task.id)
            .values(updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        db.commit()
        db.refresh(comment)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to add comment to task {task.id}: {e}")
        raise StoreError("Database error while adding comment.")
    db.expire(task, ["comments", "updated_at"])
    logger.info(f"Added comment {comment.id} to task {task.id} by user {user_id}")
    return comment

def get_comments(db: Session, task_id: int) -> List[TaskComment]:
    """
    Комментарии задачи в порядке добавления.
    """
    return (
        db.query(TaskComment)
        .filter(TaskComment.task_id == task_id)
        .order_by(TaskComment.id.asc())
        .all()
    )
