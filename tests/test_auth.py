"""
Unit tests for session endpoints and the auth guard.

Tests:
- Issuing a session cookie
- Clearing it on logout
- Rejection of missing, tampered and expired tokens
- Email ownership check
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token, decode_token


def cookie_attributes(response) -> list:
    """Lower-cased attributes of the Set-Cookie header, without the name=value pair."""
    return [part.strip().lower() for part in response.headers["set-cookie"].split(";")[1:]]


class TestSessionIssue:
    """Test POST /jwt"""

    def test_issue_sets_cookie(self, client):
        response = client.post("/jwt", json={"email": "a@x.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert settings.SESSION_COOKIE_NAME in response.cookies

    def test_cookie_attributes_in_development(self, client):
        response = client.post("/jwt", json={"email": "a@x.com"})

        attributes = cookie_attributes(response)
        assert "httponly" in attributes
        assert "samesite=strict" in attributes
        assert "secure" not in attributes

    def test_cookie_attributes_in_production(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        response = client.post("/jwt", json={"email": "a@x.com"})

        attributes = cookie_attributes(response)
        assert "httponly" in attributes
        assert "samesite=none" in attributes
        assert "secure" in attributes

    def test_token_carries_claims_and_expiry(self, client):
        response = client.post("/jwt", json={"email": "a@x.com", "name": "Alice"})

        claims = decode_token(response.cookies[settings.SESSION_COOKIE_NAME])
        assert claims["email"] == "a@x.com"
        assert claims["name"] == "Alice"
        assert "exp" in claims

    def test_issue_requires_email(self, client):
        response = client.post("/jwt", json={"name": "Alice"})

        assert response.status_code == 422

    def test_issued_cookie_unlocks_own_listing(self, client, create_job):
        """Test the full flow: session cookie from /jwt then a scoped request"""
        create_job()
        client.post("/jwt", json={"email": "a@x.com"})

        response = client.get("/jobs/a@x.com")

        assert response.status_code == 200
        assert len(response.json()) == 1


class TestLogout:
    """Test GET /logout"""

    def test_logout_clears_cookie(self, client):
        client.post("/jwt", json={"email": "a@x.com"})

        response = client.get("/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert response.headers["set-cookie"].startswith(f"{settings.SESSION_COOKIE_NAME}=")
        attributes = cookie_attributes(response)
        assert "max-age=0" in attributes
        assert "httponly" in attributes

    def test_logout_without_session(self, client):
        response = client.get("/logout")

        assert response.status_code == 200

    def test_scoped_listing_rejected_after_logout(self, client):
        client.post("/jwt", json={"email": "a@x.com"})
        client.get("/logout")

        response = client.get("/jobs/a@x.com")

        assert response.status_code == 401


class TestAuthGuard:
    """Test token validation on scoped endpoints"""

    def test_tampered_token_rejected(self, client):
        token = jwt.encode({"email": "a@x.com"}, "not-the-secret", algorithm=settings.ALGORITHM)
        client.cookies.set(settings.SESSION_COOKIE_NAME, token)

        response = client.get("/jobs/a@x.com")

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized Access!"

    def test_expired_token_rejected(self, client):
        token = create_access_token(data={"email": "a@x.com"}, expires_delta=timedelta(seconds=-10))
        client.cookies.set(settings.SESSION_COOKIE_NAME, token)

        response = client.get("/mybids/a@x.com")

        assert response.status_code == 401

    def test_garbage_token_rejected(self, client):
        client.cookies.set(settings.SESSION_COOKIE_NAME, "invalid.token.here")

        response = client.get("/bidRequests/a@x.com")

        assert response.status_code == 401

    def test_token_without_email_rejected(self, client):
        client.cookies.set(settings.SESSION_COOKIE_NAME, create_access_token(data={"name": "Alice"}))

        response = client.get("/jobs/a@x.com")

        assert response.status_code == 401

    @pytest.mark.parametrize("path", ["/jobs/a@x.com", "/mybids/a@x.com", "/bidRequests/a@x.com"])
    def test_matching_email_allowed(self, client, login, path):
        login("a@x.com")

        response = client.get(path)

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("path", ["/jobs/a@x.com", "/mybids/a@x.com", "/bidRequests/a@x.com"])
    def test_different_email_forbidden(self, client, login, path):
        login("b@x.com")

        response = client.get(path)

        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden Access!"


class TestSubmittedEmailForm:
    """The address is signed, stored and compared exactly as submitted"""

    MIXED_CASE = "Alice@Example.COM"

    def test_token_keeps_submitted_email(self, client):
        response = client.post("/jwt", json={"email": self.MIXED_CASE})

        claims = decode_token(response.cookies[settings.SESSION_COOKIE_NAME])
        assert claims["email"] == self.MIXED_CASE

    def test_mixed_case_owner_sees_own_jobs(self, client, create_job):
        create_job(buyer={"email": self.MIXED_CASE})
        client.post("/jwt", json={"email": self.MIXED_CASE})

        response = client.get(f"/jobs/{self.MIXED_CASE}")

        assert response.status_code == 200
        assert [job["buyer"]["email"] for job in response.json()] == [self.MIXED_CASE]

    def test_mixed_case_bidder_sees_own_bids(self, client, create_job, sample_bid_data):
        job_id = create_job()
        client.post("/bid", json={**sample_bid_data, "email": self.MIXED_CASE, "jobId": job_id})
        client.post("/jwt", json={"email": self.MIXED_CASE})

        response = client.get(f"/mybids/{self.MIXED_CASE}")

        assert response.status_code == 200
        assert [bid["email"] for bid in response.json()] == [self.MIXED_CASE]

    def test_invalid_email_still_rejected(self, client):
        response = client.post("/jwt", json={"email": "not-an-email"})

        assert response.status_code == 422
