"""
Pytest configuration

Provides an in-memory database, an HTTP client bound to it, authenticated
users and a mocked OpenAI client.
"""
from types import SimpleNamespace
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from apps.portfolio_service.app import ai, database
from apps.portfolio_service.app.auth import create_access_token, get_password_hash
from apps.portfolio_service.app.database import Base, configure_engine, get_db
from apps.portfolio_service.app.limiter import limiter
from apps.portfolio_service.app.main import app
from apps.portfolio_service.app.models import Portfolio, User


# ==================== Database fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    Fresh in-memory SQLite database per test.
    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_engine(engine)
    from apps.portfolio_service.app import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(test_db_engine, monkeypatch) -> Generator[TestClient, None, None]:
    """HTTP client whose requests use the test database"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    # the health check and startup hook reach for the process-wide engine
    monkeypatch.setattr(database, "_engine", test_db_engine)
    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== User fixtures ====================

def make_user(session: Session, email: str = "jane@example.com", name: str = "Jane Doe") -> User:
    user = User(email=email, name=name, password_hash=get_password_hash("secret123"))
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers_for(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def test_user(test_db_session) -> User:
    return make_user(test_db_session)


@pytest.fixture(scope="function")
def other_user(test_db_session) -> User:
    return make_user(test_db_session, email="mallory@example.com", name="Mallory")


@pytest.fixture(scope="function")
def auth_headers(test_user) -> dict:
    return auth_headers_for(test_user)


@pytest.fixture(scope="function")
def other_auth_headers(other_user) -> dict:
    return auth_headers_for(other_user)


@pytest.fixture(scope="function")
def test_portfolio(test_db_session, test_user) -> Portfolio:
    portfolio = Portfolio(
        user_id=test_user.id,
        slug="jane-doe",
        title="Jane Doe",
        subtitle="Backend engineer",
        is_published=True,
    )
    test_db_session.add(portfolio)
    test_db_session.commit()
    test_db_session.refresh(portfolio)
    return portfolio


@pytest.fixture(scope="function")
def other_portfolio(test_db_session, other_user) -> Portfolio:
    portfolio = Portfolio(user_id=other_user.id, slug="mallory", title="Mallory", is_published=True)
    test_db_session.add(portfolio)
    test_db_session.commit()
    test_db_session.refresh(portfolio)
    return portfolio


# ==================== Mock OpenAI fixtures ====================

def completion(text: str):
    """Object shaped like a chat completion response"""
    message = SimpleNamespace(content=text)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture(scope="function")
def mock_openai(monkeypatch):
    """
    Mock OpenAI client
    Replaces the process-wide client so no real API call is made
    """
    mock = Mock()
    mock.chat.completions.create.return_value = completion("Mock AI response")
    monkeypatch.setattr(ai, "get_openai_client", lambda: mock)
    return mock
