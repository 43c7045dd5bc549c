# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

import pytest
from fastapi import status

from clawdev.api.v1.dependencies import get_principal, page_window
from clawdev.core.security import CredentialStore
from clawdev.services.identity import Anonymous, HumanPrincipal


class TestPageWindow:
    """Test limit/page clamping shared by list endpoints."""

    def test_defaults(self, test_settings):
        assert page_window(None, None, test_settings) == (test_settings.page_size_default, 0)

    def test_offset_from_page(self, test_settings):
        assert page_window(10, 3, test_settings) == (10, 20)

    def test_limit_is_capped(self, test_settings):
        size, _ = page_window(10_000, 1, test_settings)
        assert size == test_settings.page_size_max

    @pytest.mark.parametrize(("limit", "page"), [(0, 0), (-5, -1)])
    def test_non_positive_values_fall_back(self, test_settings, limit, page):
        assert page_window(limit, page, test_settings) == (test_settings.page_size_default, 0)


class TestGetPrincipal:
    def test_no_header_is_anonymous(self, db_session, test_settings):
        principal = get_principal(db_session, CredentialStore(), test_settings, None)
        assert principal == Anonymous()

    def test_session_header(self, db_session, test_settings, owner, owner_headers):
        principal = get_principal(
            db_session, CredentialStore(), test_settings, owner_headers["Authorization"]
        )
        assert principal == HumanPrincipal(user_id=owner.id)


class TestAuthorizationHeaderEdgeCases:
    """Malformed credentials never authenticate."""

    def test_without_bearer_prefix(self, client):
        response = client.post("/api/v1/posts", json={"title": "x", "body": "y"}, headers={"Authorization": "Token123"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_with_empty_token(self, client):
        response = client.post("/api/v1/posts", json={"title": "x", "body": "y"}, headers={"Authorization": "Bearer "})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_with_garbage_token(self, client):
        response = client.post(
            "/api/v1/posts", json={"title": "x", "body": "y"}, headers={"Authorization": "Bearer not.a.jwt"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Unauthorized"}

    def test_malformed_json_body(self, client, owner_headers):
        response = client.post(
            "/api/v1/posts",
            content=b"{not json",
            headers={**owner_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "error" in response.json()
