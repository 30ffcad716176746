#app/models/comment.py
from datetime import datetime
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.models.base import Base

class TaskComment(Base):
    """
    TaskComment — комментарий к задаче. Живёт только вместе с задачей,
    добавляется отдельной строкой (INSERT), поэтому параллельные добавления не теряются.
    """
    __tablename__ = "task_comments"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    task_id: int = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True, doc="ID задачи")
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True, doc="Автор комментария")
    text: str = Column(Text, nullable=False, doc="Текст комментария")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")

    user = relationship("User", lazy="joined")

    def __repr__(self):
        return f"<TaskComment(id={self.id}, task_id={self.task_id}, user_id={self.user_id})>"
