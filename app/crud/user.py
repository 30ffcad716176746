#app/crud/user.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
from app.models.user import User
from app.schemas.user import UserCreate
from app.core.exceptions import ValidationError, StoreError
from typing import Optional, Union
import logging

logger = logging.getLogger("TaskTracker.Users")

def create_user(db: Session, data: Union[UserCreate, dict]) -> User:
    """
    Создаёт запись пользователя (зеркало аккаунта из auth-сервиса).
    Принимает UserCreate или dict, dict проходит ту же валидацию (username, EmailStr).
    """
    if not isinstance(data, UserCreate):
        try:
            data = UserCreate.model_validate(data)
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationError("Invalid user data.", errors=errors)

    user = User(
        username=data.username.strip(),
        email=str(data.email).lower(),
        first_name=data.first_name,
        last_name=data.last_name,
        avatar_url=data.avatar_url,
        is_active=data.is_active,
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
        logger.info(f"Created user '{user.username}' (ID: {user.id})")
        return user
    except IntegrityError:
        db.rollback()
        logger.warning(f"User '{data.username}' or email '{data.email}' already exists")
        raise ValidationError("User with this username or email already exists.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create user: {e}")
        raise StoreError("Database error while creating user.")

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()
