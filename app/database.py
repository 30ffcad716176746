# app/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.settings import settings

# SQLite (локальная разработка/тесты) не любит соединения из разных потоков
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Создаем движок подключения к БД
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Фабрика сессий: get_db открывает новую сессию на каждый запрос
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

def init_db() -> None:
    """
    Создаёт таблицы, если их ещё нет.
    """
    import app.models  # noqa: F401  регистрирует модели в Base.metadata
    from app.models.base import Base

    Base.metadata.create_all(bind=engine)
