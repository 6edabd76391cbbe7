"""
Pytest configuration and fixtures.

Every test runs against a fresh in-memory SQLite database seeded with the
milestone and achievement catalogue. API tests share the test's session with
the app through a get_db override.
"""
import os

os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_SECRET_KEY", "test-secret")
os.environ["WEBHOOK_RATE_LIMIT_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

import quest_api.db.models  # noqa: F401
from quest_api.auth.accounts import issue_token
from quest_api.core.rate_limit import InMemoryRateLimiter
from quest_api.db.base import Base
from quest_api.db.crud import user as user_crud
from quest_api.db.engine import SessionLocal, engine
from quest_api.db.seed import seed_reference_data
from quest_api.dependencies import get_db
from quest_api.main import app


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_reference_data(session)

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def rate_limiter():
    return InMemoryRateLimiter(max_requests=10, window_seconds=3600)


@pytest.fixture
def client(db_session, rate_limiter):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.state.webhook_rate_limiter = rate_limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Create a user directly; password hashing is skipped for speed."""
    counter = {"n": 0}

    def _make(email=None, display_name="Frodo Baggins"):
        counter["n"] += 1
        email = email or f"walker{counter['n']}@shire.me"
        return user_crud.create_user(db_session, email=email, password_hash="!unusable", display_name=display_name)

    return _make


@pytest.fixture
def user(make_user):
    return make_user(email="frodo@shire.me")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}
