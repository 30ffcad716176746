#app/core/permissions.py
"""
Правила доступа к задачам.

Чистые функции: принимают идентификатор вызывающего и загруженную задачу,
в базу не ходят. Все сравнения идут через normalize_identity, поэтому
User, int и строковый id из токена сравниваются одинаково.

    read / update  — исполнитель (assigned_to) ИЛИ автор (created_by)
    delete         — только автор
    comment        — любой аутентифицированный пользователь
"""
from typing import Any, Optional

from app.core.exceptions import TaskForbidden


def normalize_identity(value: Any) -> Optional[int]:
    """
    Приводит идентификатор пользователя к int.
    Принимает int, числовую строку или объект с атрибутом `id` (User).
    """
    if value is None:
        return None
    if hasattr(value, "id") and not isinstance(value, (int, str)):
        value = value.id
        if value is None:
            return None
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid user identity")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.isdigit():
            return int(value)
        raise ValueError(f"Invalid user identity: {value!r}")
    raise TypeError(f"Unsupported identity type: {type(value).__name__}")


def same_identity(left: Any, right: Any) -> bool:
    left_id = normalize_identity(left)
    right_id = normalize_identity(right)
    if left_id is None or right_id is None:
        return False
    return left_id == right_id


def _is_assignee(caller: Any, task: Any) -> bool:
    return same_identity(caller, task.assigned_to_id)


def _is_creator(caller: Any, task: Any) -> bool:
    return same_identity(caller, task.created_by_id)


def can_read_task(caller: Any, task: Any) -> bool:
    return _is_assignee(caller, task) or _is_creator(caller, task)


def can_update_task(caller: Any, task: Any) -> bool:
    return _is_assignee(caller, task) or _is_creator(caller, task)


def can_delete_task(caller: Any, task: Any) -> bool:
    return _is_creator(caller, task)


def can_comment_on_task(caller: Any, task: Any) -> bool:
    """
    Комментировать может любой, кто знает id задачи.
    Это расходится с правилом чтения; оставлено как есть до решения продукта.
    """
    return True


def ensure_can_read_task(caller: Any, task: Any) -> None:
    if not can_read_task(caller, task):
        raise TaskForbidden("Not authorized to access this task")


def ensure_can_update_task(caller: Any, task: Any) -> None:
    if not can_update_task(caller, task):
        raise TaskForbidden("Not authorized to update this task")


def ensure_can_delete_task(caller: Any, task: Any) -> None:
    if not can_delete_task(caller, task):
        raise TaskForbidden("Not authorized to delete this task")
