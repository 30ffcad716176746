#app/schemas/user.py
from pydantic import BaseModel, ConfigDict, Field, EmailStr, constr
from pydantic.alias_generators import to_camel
from typing import Optional

class UserCreate(BaseModel):
    """
    UserCreate — данные пользователя, пришедшие от auth-сервиса (регистрация вне этого сервиса).
    """
    username: constr(min_length=3, max_length=50) = Field(..., examples=["john_doe"], description="Уникальный username")
    email: EmailStr = Field(..., examples=["john.doe@example.com"], description="Email пользователя")
    first_name: Optional[str] = Field(None, max_length=64, examples=["John"], description="Имя")
    last_name: Optional[str] = Field(None, max_length=64, examples=["Doe"], description="Фамилия")
    avatar_url: Optional[str] = Field(None, description="URL аватара")
    is_active: bool = Field(True, description="Пользователь активен")

class UserSummary(BaseModel):
    """
    UserSummary — краткая проекция пользователя для ссылок в задаче.
    """
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class UserDetail(UserSummary):
    """
    UserDetail — проекция с аватаром (карточка задачи, комментарии).
    """
    avatar: Optional[str] = None
