#app/models/task.py
import enum
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, JSON, Index, func
)
from sqlalchemy.orm import relationship
from app.models.base import Base
from app.models.comment import TaskComment

class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"

class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

class Task(Base):
    """
    Task — задача пользователя. Всегда имеет автора (created_by) и исполнителя (assigned_to),
    категория опциональна, комментарии удаляются вместе с задачей.
    """
    __tablename__ = "tasks"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    title: str = Column(String(200), nullable=False, doc="Название задачи")
    description: str = Column(String(2000), nullable=True, default="", doc="Описание")
    status: str = Column(String(24), nullable=False, default=TaskStatus.TODO.value, doc="Статус: todo, in-progress, completed, archived")
    priority: str = Column(String(16), nullable=False, default=TaskPriority.MEDIUM.value, doc="Приоритет: low, medium, high, urgent")
    category_id: int = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True, doc="ID категории")
    assigned_to_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, doc="Исполнитель")
    created_by_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True, doc="Автор (не меняется)")
    due_date: datetime = Column(DateTime(timezone=True), nullable=True, doc="Срок")
    tags: list = Column(JSON, nullable=False, default=lambda: [], doc="Теги задачи (порядок важен)")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False, doc="Дата изменения")

    category = relationship("Category", lazy="joined")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id], lazy="joined")
    created_by = relationship("User", foreign_keys=[created_by_id], lazy="joined")
    comments = relationship(
        "TaskComment",
        order_by=TaskComment.id,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_tasks_assigned_status", "assigned_to_id", "status"),
        Index("ix_tasks_due_date", "due_date"),
    )

    def __repr__(self):
        return (
            f"<Task(id={self.id}, title='{self.title}', status={self.status}, "
            f"priority={self.priority}, assigned_to_id={self.assigned_to_id}, "
            f"created_by_id={self.created_by_id})>"
        )
