#app/schemas/task.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from app.models.task import TaskStatus, TaskPriority
from app.schemas.category import CategorySummary
from app.schemas.comment import CommentRead
from app.schemas.user import UserSummary, UserDetail

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000

def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return v

def _clean_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return v

class TaskCreate(BaseModel):
    """
    TaskCreate — создание новой задачи.
    createdBy принимается, но игнорируется: автором всегда становится вызывающий.
    """
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., examples=["Write report"], description="Название задачи (до 200 символов)")
    description: Optional[str] = Field(None, examples=["Quarterly numbers"], description="Описание (до 2000 символов)")
    status: TaskStatus = Field(TaskStatus.TODO, description="Статус: todo, in-progress, completed, archived")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Приоритет: low, medium, high, urgent")
    category: Optional[int] = Field(None, examples=[1], description="ID категории")
    assigned_to: Optional[int] = Field(None, examples=[2], description="ID исполнителя (по умолчанию — автор)")
    created_by: Optional[int] = Field(None, exclude=True, description="Игнорируется")
    due_date: Optional[datetime] = Field(None, examples=["2024-12-31T18:00:00Z"], description="Срок")
    tags: List[str] = Field(default_factory=list, examples=[["backend", "q4"]], description="Теги задачи")

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

class TaskUpdate(BaseModel):
    """
    TaskUpdate — частичное обновление задачи (все поля опциональны, но не nullable там, где задача не допускает null).
    """
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category: Optional[int] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = Field(None, exclude=True, description="Игнорируется: автор задачи не меняется")
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "status", "priority", "assigned_to", "tags", mode="before")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v) if v is not None else v

    @field_validator("description")
    @classmethod
    def clean_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

class TaskRead(BaseModel):
    """
    TaskRead — задача с раскрытыми ссылками (список, создание, обновление).
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    category: Optional[CategorySummary] = None
    assigned_to: UserSummary
    created_by: UserSummary
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    comments: List[CommentRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

class TaskDetail(TaskRead):
    """
    TaskDetail — карточка задачи: исполнитель и автор с аватарами.
    """
    assigned_to: UserDetail
    created_by: UserDetail

class StatusCount(BaseModel):
    status: str
    count: int

class PriorityCount(BaseModel):
    priority: str
    count: int

class TaskStats(BaseModel):
    """
    TaskStats — сводка по задачам пользователя (две независимые группировки).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    by_status: List[StatusCount] = Field(default_factory=list)
    by_priority: List[PriorityCount] = Field(default_factory=list)
