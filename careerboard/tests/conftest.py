"""
Pytest configuration and shared fixtures for the CareerBoard API tests.
"""
import os
import tempfile

# Settings are cached on first import, so the test environment must be in
# place before the application is imported.
UPLOAD_DIR = tempfile.mkdtemp(prefix="careerboard-uploads-")
os.environ.update({
    "TESTING": "true",
    "SECRET_KEY": "test-secret-key-for-jwt-tokens-12345678901234567890",
    "LOG_LEVEL": "DEBUG",
    "UPLOAD_DIRECTORY": UPLOAD_DIR,
})

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from careerboard.backend.main import app
from careerboard.backend.models.db.database import Base, build_engine, get_db
from careerboard.backend.services.application_store import ApplicationStore
from careerboard.backend.services.application_tracker import ApplicationService
from careerboard.backend.services.blob_store import LocalBlobStore


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """A fresh in-memory SQLite database for every test."""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# Service Fixtures
@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(directory=str(tmp_path / "uploads"), url_prefix="/uploads", max_size=1024)


@pytest.fixture
def application_service(test_db_session, blob_store):
    return ApplicationService(ApplicationStore(test_db_session), blob_store)


# User Fixtures
@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "name": "Test User",
        "email": "test@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
def other_user_data():
    return {
        "name": "Other User",
        "email": "other@example.com",
        "password": "otherpassword123",
    }


def _register(client, user_data):
    response = client.post("/auth/register", json=user_data)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(test_client, test_user_data):
    """Authentication headers for the primary test user."""
    return _register(test_client, test_user_data)


@pytest.fixture
def other_auth_headers(test_client, other_user_data):
    """Authentication headers for a second user who owns nothing of the first."""
    return _register(test_client, other_user_data)


@pytest.fixture
def created_application(test_client, auth_headers):
    """An application owned by the primary test user, with the default rounds."""
    response = test_client.post(
        "/applications",
        json={"company_name": "Acme", "role": "Engineer"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def upload_dir():
    return UPLOAD_DIR
