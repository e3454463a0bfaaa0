"""
Pytest configuration and shared fixtures.

Test environment variables are set here, before any app module is imported,
and the settings cache is cleared so they take effect.
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///./test_social_media.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MISSING_ACCOUNT_POLICY"] = "error"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from social_api.config import get_settings  # noqa: E402

get_settings.cache_clear()

from social_api import models  # noqa: E402,F401
from social_api.main import app  # noqa: E402
from social_api.storage import Base, SessionLocal, SqlAlchemyStore, engine  # noqa: E402


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Session on a fresh schema, for tests that talk to the services directly."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return SqlAlchemyStore(db_session)

