#app/schemas/response.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional

from app.schemas.comment import CommentRead
from app.schemas.task import TaskRead, TaskDetail, TaskStats

class FieldError(BaseModel):
    """
    FieldError — ошибка валидации конкретного поля.
    """
    field: str = Field(..., examples=["title"], description="Поле (путь через точку)")
    message: str = Field(..., examples=["Title is required"], description="Сообщение об ошибке")

class ErrorResponse(BaseModel):
    """
    ErrorResponse — стандартная структура для ошибки.
    """
    success: bool = False
    message: str = Field(..., examples=["Task not found"], description="Сообщение об ошибке")
    error: Optional[str] = Field(None, description="Текст исключения (только в DEBUG)")
    errors: Optional[List[FieldError]] = Field(None, description="Ошибки валидации по полям")

class MessageResponse(BaseModel):
    """
    MessageResponse — подтверждение действия без полезной нагрузки.
    """
    success: bool = True
    message: str = Field(..., examples=["Task deleted successfully"])
    data: Dict[str, Any] = Field(default_factory=dict)

class TaskListResponse(BaseModel):
    """
    TaskListResponse — страница задач с пагинацией.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    count: int = Field(..., description="Количество задач на странице")
    total: int = Field(..., description="Всего задач под фильтром")
    total_pages: int = Field(..., description="ceil(total / limit)")
    current_page: int = Field(..., description="Номер страницы (с 1)")
    data: List[TaskRead] = Field(default_factory=list)

class TaskResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: TaskRead

class TaskDetailResponse(BaseModel):
    success: bool = True
    data: TaskDetail

class CommentListResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: List[CommentRead] = Field(default_factory=list)

class TaskStatsResponse(BaseModel):
    success: bool = True
    data: TaskStats
