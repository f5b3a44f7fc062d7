"""Tests for auth module: access tokens, owner context, dev token endpoint."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import jwt as pyjwt
import pytest

from draftboard.auth.context import OwnerContext
from draftboard.auth.jwt_handler import create_access_token, decode_access_token, dev_owner_id
from draftboard.errors import OwnerRequired


def _settings(**overrides):
    s = MagicMock()
    s.JWT_SECRET_KEY = "test-secret-key-for-testing"
    s.JWT_ACCESS_EXPIRE_MINUTES = 60
    s.ADMIN_API_KEY = ""
    for key, value in overrides.items():
        setattr(s, key, value)
    return s


# ---------------------------------------------------------------------------
# JWT access token tests
# ---------------------------------------------------------------------------


@pytest.mark.fast
class TestAccessToken:
    def test_create_and_decode(self):
        token = create_access_token("user-123")
        assert isinstance(token, str)
        assert decode_access_token(token) == "user-123"

    def test_expired_token(self):
        with patch("draftboard.auth.jwt_handler.get_settings") as mock_settings:
            mock_settings.return_value = _settings(JWT_ACCESS_EXPIRE_MINUTES=-1)
            token = create_access_token("user-123")
            with pytest.raises(ValueError, match="expired"):
                decode_access_token(token)

    def test_wrong_secret(self):
        token = pyjwt.encode({"sub": "u1", "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(ValueError, match="Invalid access token"):
            decode_access_token(token)

    def test_image_token_is_not_access_token(self):
        with patch("draftboard.auth.jwt_handler.get_settings") as mock_settings:
            mock_settings.return_value = _settings()
            token = pyjwt.encode(
                {"sub": "u1-1000.png", "type": "image"},
                "test-secret-key-for-testing",
                algorithm="HS256",
            )
            with pytest.raises(ValueError, match="not an access token"):
                decode_access_token(token)

    def test_missing_subject(self):
        with patch("draftboard.auth.jwt_handler.get_settings") as mock_settings:
            mock_settings.return_value = _settings()
            token = pyjwt.encode({"type": "access"}, "test-secret-key-for-testing", algorithm="HS256")
            with pytest.raises(ValueError, match="missing subject"):
                decode_access_token(token)


@pytest.mark.fast
class TestDevOwnerId:
    def test_stable_and_case_insensitive(self):
        assert dev_owner_id("Me@Example.com") == dev_owner_id(" me@example.com ")

    def test_format(self):
        owner_id = dev_owner_id("me@example.com")
        assert owner_id.startswith("dev_")
        assert len(owner_id) == 20

    def test_distinct_emails(self):
        assert dev_owner_id("a@example.com") != dev_owner_id("b@example.com")


@pytest.mark.fast
class TestOwnerContext:
    def test_valid(self):
        assert OwnerContext("u1").owner_id == "u1"

    @pytest.mark.parametrize("owner_id", ["", "   ", None])
    def test_owner_required(self, owner_id):
        with pytest.raises(OwnerRequired):
            OwnerContext(owner_id)


# ---------------------------------------------------------------------------
# Endpoint tests
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestAuthEndpoints:
    @pytest.mark.asyncio
    async def test_posts_require_token(self, async_client):
        response = await async_client.get("/api/v1/posts")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_bad_token(self, async_client):
        response = await async_client.get(
            "/api/v1/posts", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401
        assert "Invalid access token" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_dev_token_disabled_without_admin_key(self, async_client):
        with patch("draftboard.auth.dependencies.get_settings", return_value=_settings()):
            response = await async_client.post(
                "/api/v1/auth/dev/token", json={"email": "me@example.com"}
            )
        assert response.status_code == 403
        assert "disabled" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_dev_token_wrong_key(self, async_client):
        with patch(
            "draftboard.auth.dependencies.get_settings",
            return_value=_settings(ADMIN_API_KEY="right"),
        ):
            response = await async_client.post(
                "/api/v1/auth/dev/token",
                json={"email": "me@example.com"},
                headers={"X-Admin-Key": "wrong"},
            )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_dev_token_issued(self, async_client):
        with patch(
            "draftboard.auth.dependencies.get_settings",
            return_value=_settings(ADMIN_API_KEY="right"),
        ):
            response = await async_client.post(
                "/api/v1/auth/dev/token",
                json={"email": "me@example.com"},
                headers={"X-Admin-Key": "right"},
            )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["owner_id"] == dev_owner_id("me@example.com")
        assert decode_access_token(data["access_token"]) == data["owner_id"]

        listing = await async_client.get(
            "/api/v1/posts",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert listing.status_code == 200
        assert listing.json() == {"items": [], "total": 0}
