"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- In-memory MongoDB (mongomock) setup/teardown
- FastAPI test client
- Session cookies
- Sample payloads
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import get_db, init_db
from app.core.security import create_access_token
from main import app


@pytest.fixture
def db_session():
    """
    Create a fresh in-memory database for each test.
    Indexes are created the same way the app does at startup.
    """
    mongo_client = mongomock.MongoClient()
    db = mongo_client[settings.MONGO_DB_NAME]
    init_db(db)
    try:
        yield db
    finally:
        mongo_client.drop_database(settings.MONGO_DB_NAME)
        mongo_client.close()


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.

    The lifespan is not entered, so no real MongoDB connection is made.
    """
    app.dependency_overrides[get_db] = lambda: db_session

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Put a session cookie for the given email into the client's cookie jar."""
    def _login(email: str) -> str:
        token = create_access_token(data={"email": email})
        client.cookies.set(settings.SESSION_COOKIE_NAME, token)
        return token

    return _login


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Logo Design",
        "category": "Design",
        "description": "Need a clean, modern logo for a coffee roastery.",
        "deadline": "2025-01-01",
        "min_price": 100,
        "max_price": 300,
        "buyer": {
            "email": "a@x.com",
            "name": "Alice Buyer",
            "photo": "https://img.example.org/alice.png"
        }
    }


@pytest.fixture
def create_job(client, sample_job_data):
    """Post a job through the API and return its id."""
    def _create_job(**overrides) -> str:
        payload = {**sample_job_data, **overrides}
        response = client.post("/job", json=payload)
        assert response.status_code == 200
        return response.json()["insertedId"]

    return _create_job


@pytest.fixture
def sample_bid_data():
    """Sample bid data for testing; jobId is filled in per test"""
    return {
        "email": "b@x.com",
        "price": 250,
        "deadline": "2024-12-20",
        "comment": "I can deliver three concepts within a week.",
        "job_title": "Logo Design",
        "category": "Design",
        "buyer": {"email": "a@x.com", "name": "Alice Buyer"}
    }
