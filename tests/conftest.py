"""Pytest configuration and fixtures."""

import os
import tempfile

# Uploaded files from the whole test session land in a throwaway directory
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="roster-test-storage-"))

import mongomock
import pytest
from fastapi.testclient import TestClient

from roster.api.rate_limit import rate_limit
from roster.config import get_settings
from roster.database import get_db
from roster.main import app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(scope="function")
def db():
    """Fresh in-memory database for each test."""
    mongo = mongomock.MongoClient()
    yield mongo["roster_test"]
    mongo.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[rate_limit] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def storage_dir():
    return get_settings().storage_dir


@pytest.fixture
def company(client):
    """Create a company and return its JSON representation."""
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme Corp", "since": "2001-05-01T00:00:00Z"},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def user_form():
    """Build multipart fields for a valid user; None drops a field."""

    def build(**overrides):
        data = {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "secret123",
            "password_confirmation": "secret123",
        }
        data.update(overrides)
        return {name: value for name, value in data.items() if value is not None}

    return build


@pytest.fixture
def avatar_file():
    """Build the files argument carrying an avatar image."""

    def build(filename="ada.png", content_type="image/png", content=PNG_BYTES):
        return {"avatar": (filename, content, content_type)}

    return build


@pytest.fixture
def user(client, user_form, avatar_file):
    """Create a user and return its JSON representation."""
    response = client.post("/api/v1/users", data=user_form(), files=avatar_file())
    assert response.status_code == 200
    return response.json()
