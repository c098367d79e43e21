"""
Unit tests for token utilities and request-level error mapping.

Tests:
- Token encode/decode and expiry
- Cookie attribute profiles
- ObjectId path parsing
- Store failures mapped to an opaque 500
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import JWTError
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import parse_object_id
from app.core.security import create_access_token, decode_token, session_cookie_options
from main import app


class TestTokens:
    """Test JWT helpers"""

    def test_round_trip_keeps_claims(self):
        token = create_access_token(data={"email": "a@x.com", "role": "buyer"})

        payload = decode_token(token)

        assert payload["email"] == "a@x.com"
        assert payload["role"] == "buyer"

    def test_default_expiry_is_seven_days(self):
        before = datetime.now(timezone.utc)

        payload = decode_token(create_access_token(data={"email": "a@x.com"}))

        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert timedelta(days=6, hours=23) < expires - before <= timedelta(days=7, seconds=5)

    def test_input_claims_not_mutated(self):
        claims = {"email": "a@x.com"}

        create_access_token(data=claims)

        assert claims == {"email": "a@x.com"}

    def test_expired_token_raises(self):
        token = create_access_token(data={"email": "a@x.com"}, expires_delta=timedelta(minutes=-1))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_wrong_secret_raises(self, monkeypatch):
        token = create_access_token(data={"email": "a@x.com"})
        monkeypatch.setattr(settings, "ACCESS_TOKEN_SECRET", "rotated-secret")

        with pytest.raises(JWTError):
            decode_token(token)


class TestCookieOptions:
    def test_development_profile(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")

        assert session_cookie_options() == {"httponly": True, "secure": False, "samesite": "strict"}

    def test_production_profile(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "Production")

        assert session_cookie_options() == {"httponly": True, "secure": True, "samesite": "none"}


class TestObjectIdParsing:
    def test_valid_id(self):
        assert str(parse_object_id("65a1f0c2e4b0a1b2c3d4e5f6")) == "65a1f0c2e4b0a1b2c3d4e5f6"

    @pytest.mark.parametrize("value", ["", "123", "zzzzzzzzzzzzzzzzzzzzzzzz"])
    def test_invalid_id(self, value):
        with pytest.raises(HTTPException) as exc_info:
            parse_object_id(value)

        assert exc_info.value.status_code == 400


class TestStoreFailures:
    """Store errors must surface as a generic 500"""

    @pytest.fixture
    def failing_client(self):
        failing_db = MagicMock()
        failing_db.__getitem__.return_value.find.side_effect = PyMongoError("server selection timeout")
        failing_db.__getitem__.return_value.count_documents.side_effect = PyMongoError("server selection timeout")
        app.dependency_overrides[get_db] = lambda: failing_db

        yield TestClient(app)

        app.dependency_overrides.clear()

    @pytest.mark.parametrize("path", ["/jobs", "/allJobs", "/jobsCount"])
    def test_store_error_maps_to_500(self, failing_client, path):
        response = failing_client.get(path)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        assert "timeout" not in response.text
