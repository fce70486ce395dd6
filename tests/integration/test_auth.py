"""Integration tests for JWT authentication.

Validates:
  - /health is public (plain Django view, no DRF).
  - Protected DRF endpoints return 401 without or with a bad token.
  - A token obtained from /api/v1/auth/token/ opens the API.
"""

import pytest
from django.contrib.auth import get_user_model

pytestmark = pytest.mark.integration


@pytest.fixture()
def user():
    return get_user_model().objects.create_user(username="owner", password="s3cret-pass")


class TestProtectedEndpoints:
    def test_no_token_returns_401(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert "Bearer" in response.get("WWW-Authenticate", "")


class TestTokenFlow:
    def test_obtained_token_opens_the_api(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "owner", "password": "s3cret-pass"},
            format="json",
        )
        assert response.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['access']}")
        me = api_client.get("/api/v1/me")

        assert me.status_code == 200
        assert me.json()["user"] == "owner"

    def test_wrong_password(self, api_client, user):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "owner", "password": "nope"},
            format="json",
        )
        assert response.status_code == 401
