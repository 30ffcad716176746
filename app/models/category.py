#app/models/category.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from app.models.base import Base

class Category(Base):
    """
    Category — категория задач. CRUD категорий живёт в отдельном сервисе,
    задачи хранят только слабую ссылку на неё.
    """
    __tablename__ = "categories"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(50), unique=True, nullable=False, index=True, doc="Название категории")
    description: str = Column(String(200), nullable=True, doc="Описание")
    color: str = Column(String(7), nullable=True, default="#3b82f6", doc="Цвет (#hex)")
    icon: str = Column(String(50), nullable=True, doc="Иконка")
    created_by_id: int = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True, doc="Кто создал")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
