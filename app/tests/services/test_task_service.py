import pytest
from sqlalchemy.orm import Session

from app.services import task_service
from app.schemas.task import TaskCreate, TaskUpdate
from app.schemas.comment import CommentCreate
from app.core.exceptions import TaskForbidden, TaskNotFound, TaskValidationError


def test_create_task_sets_creator_from_caller(db: Session, test_user, other_user):
    payload = TaskCreate(title="Delegate", assigned_to=other_user.id, created_by=other_user.id)
    task = task_service.create_task(db, test_user, payload)
    assert task.created_by.id == test_user.id
    assert task.assigned_to.id == other_user.id
    assert task.status == "todo"


def test_create_task_assignee_defaults_to_caller(db: Session, test_user):
    task = task_service.create_task(db, test_user, TaskCreate(title="Mine"))
    assert task.assigned_to.id == test_user.id


def test_list_tasks_total_pages(db: Session, test_user, task_factory):
    for i in range(11):
        task_factory(f"T{i}")
    page = task_service.list_tasks(db, test_user, page=3, limit=5)
    assert page.total == 11
    assert page.total_pages == 3
    assert page.current_page == 3
    assert page.count == 1


def test_list_tasks_drops_empty_filters(db: Session, test_user, task_factory):
    task_factory("Only")
    page = task_service.list_tasks(db, test_user, filters={"status": None, "search": None})
    assert page.total == 1


def test_list_tasks_empty_has_zero_pages(db: Session, third_user):
    page = task_service.list_tasks(db, third_user)
    assert page.total == 0
    assert page.total_pages == 0
    assert page.data == []


def test_get_task_detail_checks_existence_before_permission(db: Session, other_user, task_factory):
    task = task_factory("Hidden")
    with pytest.raises(TaskNotFound):
        task_service.get_task_detail(db, other_user, 99999)
    with pytest.raises(TaskForbidden):
        task_service.get_task_detail(db, other_user, task.id)


def test_update_task_partial(db: Session, test_user, task_factory):
    task = task_factory("Partial", priority="low")
    updated = task_service.update_task(db, test_user, task.id, TaskUpdate(status="completed"))
    assert updated.status == "completed"
    assert updated.priority == "low"
    assert updated.title == "Partial"


def test_update_task_unknown_category(db: Session, test_user, task_factory):
    task = task_factory("Categorise")
    with pytest.raises(TaskValidationError, match="Category not found."):
        task_service.update_task(db, test_user, task.id, TaskUpdate(category=987654))


def test_delete_task_only_by_creator(db: Session, test_user, other_user, task_factory):
    task = task_factory("Shared", assigned_to=other_user)
    with pytest.raises(TaskForbidden, match="Not authorized to delete this task"):
        task_service.delete_task(db, other_user, task.id)
    task_service.delete_task(db, test_user, task.id)
    with pytest.raises(TaskNotFound):
        task_service.get_task_detail(db, test_user, task.id)


def test_add_comment_returns_full_thread(db: Session, test_user, other_user, task_factory):
    task = task_factory("Talk")
    task_service.add_comment(db, test_user, task.id, CommentCreate(text="hi"))
    thread = task_service.add_comment(db, other_user, task.id, CommentCreate(text="  hello  "))
    assert [c.text for c in thread] == ["hi", "hello"]
    assert [c.user.id for c in thread] == [test_user.id, other_user.id]


def test_task_stats_sums_match_total(db: Session, test_user, other_user, task_factory):
    task_factory("A", status="todo", priority="high")
    task_factory("B", status="completed", priority="high")
    task_factory("C", status="completed", priority="urgent")
    task_factory("D", created_by=other_user)

    stats = task_service.get_task_stats(db, test_user)
    assert stats.total == 3
    assert sum(s.count for s in stats.by_status) == stats.total
    assert sum(p.count for p in stats.by_priority) == stats.total
    assert {s.status: s.count for s in stats.by_status} == {"completed": 2, "todo": 1}
