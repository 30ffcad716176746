import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import os
from datetime import timedelta
from typing import Callable, Generator, Any

# Set environment variables BEFORE importing settings or the app,
# so the Settings() singleton is built from test values.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "testsecretkey"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["DEBUG"] = "false"

# Import all model modules first so Base.metadata is populated.
import app.models

from app.models.base import Base
from app.models.category import Category
from app.core.settings import settings as app_settings

# Import the FastAPI app AFTER settings are overridden and models are loaded.
from app.main import app

engine = create_engine(
    app_settings.DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

from app.dependencies import get_db
from app.crud.user import create_user, get_user_by_username
from app.core import security


@pytest.fixture(scope="session", autouse=True)
def create_test_tables_session_scope():
    """
    Create all tables once per test session. Drops them again after the session.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Database session per test; everything is rolled back afterwards.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def other_db(db: Session) -> Generator[Session, None, None]:
    """
    Second independent session on the same test connection (another "request").
    """
    session = TestingSessionLocal(bind=db.get_bind())
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with `get_db` overridden to the test session.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    del app.dependency_overrides[get_db]


def _get_or_create_user(db: Session, username: str, **extra: Any):
    user = get_user_by_username(db, username=username)
    if user:
        return user
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "first_name": extra.get("first_name", username.capitalize()),
        "last_name": extra.get("last_name", "Tester"),
        "avatar_url": extra.get("avatar_url"),
        "is_active": extra.get("is_active", True),
    }
    return create_user(db=db, data=data)


def _token_headers(username: str) -> dict[str, str]:
    token, _ = security.create_access_token(
        data={"sub": username},
        expires_delta=timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def test_user(db: Session) -> Any:
    """Caller A."""
    return _get_or_create_user(db, "alice", avatar_url="https://cdn.example.com/a.png")


@pytest.fixture(scope="function")
def other_user(db: Session) -> Any:
    """Caller B, unrelated to A's tasks."""
    return _get_or_create_user(db, "bob")


@pytest.fixture(scope="function")
def third_user(db: Session) -> Any:
    return _get_or_create_user(db, "carol")


@pytest.fixture(scope="function")
def inactive_user(db: Session) -> Any:
    return _get_or_create_user(db, "dormant", is_active=False)


@pytest.fixture(scope="function")
def user_token_headers(test_user: Any) -> dict[str, str]:
    return _token_headers(test_user.username)


@pytest.fixture(scope="function")
def other_user_token_headers(other_user: Any) -> dict[str, str]:
    return _token_headers(other_user.username)


@pytest.fixture(scope="function")
def third_user_token_headers(third_user: Any) -> dict[str, str]:
    return _token_headers(third_user.username)


@pytest.fixture(scope="function")
def inactive_user_token_headers(inactive_user: Any) -> dict[str, str]:
    return _token_headers(inactive_user.username)


@pytest.fixture(scope="function")
def category(db: Session, test_user: Any) -> Category:
    cat = Category(name="Work", color="#ff0000", icon="briefcase", created_by_id=test_user.id)
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


@pytest.fixture(scope="function")
def task_factory(db: Session, test_user: Any) -> Callable[..., Any]:
    """
    Creates tasks straight through the store, bypassing HTTP.
    """
    from app.crud.task import create_task as crud_create_task

    def _create(title: str = "Task", created_by=None, assigned_to=None, **fields: Any):
        creator = created_by or test_user
        assignee = assigned_to or creator
        data = {
            "title": title,
            "created_by_id": creator.id,
            "assigned_to_id": assignee.id,
        }
        data.update(fields)
        return crud_create_task(db, data)

    return _create
