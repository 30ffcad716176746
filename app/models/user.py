#app/models/user.py
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, func
)
from app.models.base import Base

class User(Base):
    """
    User — аккаунт пользователя. Регистрацией и паролями владеет auth-сервис,
    здесь только поля, нужные для проверки доступа и раскрытия ссылок в задачах.
    """
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String(50), unique=True, nullable=False, index=True, doc="Уникальный username")
    email: str = Column(String(255), unique=True, nullable=False, index=True, doc="Email")
    first_name: str = Column(String(64), nullable=True, doc="Имя")
    last_name: str = Column(String(64), nullable=True, doc="Фамилия")
    avatar_url: str = Column(String(255), nullable=True, doc="URL аватара пользователя")
    is_active: bool = Column(Boolean, default=True, nullable=False, doc="Аккаунт активен")
    created_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, doc="Дата создания")
    updated_at: datetime = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False, doc="Дата обновления")

    @property
    def avatar(self) -> str | None:
        return self.avatar_url

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', email='{self.email}')>"
