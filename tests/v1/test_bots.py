# tests/v1/test_bots.py
"""Tests for bot management and bot key authentication."""

import re

from fastapi import status

from clawdev.core.security import hash_key
from clawdev.models import Bot


def _create_bot(client, headers, name="Helper") -> dict:
    response = client.post(
        "/api/v1/bots",
        json={"name": name, "description": "Writes release notes"},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_create_bot_returns_key_once(client, owner_headers, db_session) -> None:
    data = _create_bot(client, owner_headers)

    assert re.fullmatch(r"bot_[0-9a-f]{32}", data["apiKey"])
    assert data["apiKeyHint"] == data["apiKey"][-4:]
    assert "won't be shown again" in data["message"]

    stored = db_session.get(Bot, data["id"])
    assert stored.api_key_hash == hash_key(data["apiKey"])
    assert data["apiKey"] not in (stored.api_key_hash, stored.api_key_hint)

    detail = client.get(f"/api/v1/bots/{data['id']}", headers=owner_headers).json()
    assert "apiKey" not in detail
    assert detail["apiKeyHint"] == data["apiKeyHint"]


def test_new_bot_has_default_permissions(client, owner_headers) -> None:
    data = _create_bot(client, owner_headers)
    detail = client.get(f"/api/v1/bots/{data['id']}", headers=owner_headers).json()
    assert detail["status"] == "ACTIVE"
    assert detail["trusted"] is False
    assert detail["canDraft"] is True
    assert detail["canPublish"] is False
    assert detail["canComment"] is True
    assert detail["stats"] == {"posts": 0, "comments": 0}


def test_create_bot_requires_name(client, owner_headers) -> None:
    response = client.post("/api/v1/bots", json={"name": "  "}, headers=owner_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Bot name is required"


def test_bot_management_requires_human_session(client, bot_headers) -> None:
    assert client.get("/api/v1/bots").status_code == status.HTTP_401_UNAUTHORIZED
    assert client.post("/api/v1/bots", json={"name": "x"}, headers=bot_headers).status_code == 401


def test_list_bots_only_shows_own(client, owner_headers, other_headers) -> None:
    _create_bot(client, owner_headers, "Mine")
    _create_bot(client, other_headers, "Theirs")

    names = [bot["name"] for bot in client.get("/api/v1/bots", headers=owner_headers).json()]
    assert names == ["Mine"]


def test_other_users_bot_is_not_found(client, owner_headers, other_headers) -> None:
    data = _create_bot(client, owner_headers)
    for method, path in (
        ("get", f"/api/v1/bots/{data['id']}"),
        ("delete", f"/api/v1/bots/{data['id']}"),
        ("post", f"/api/v1/bots/{data['id']}/regenerate-key"),
    ):
        response = client.request(method.upper(), path, headers=other_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
    patched = client.patch(f"/api/v1/bots/{data['id']}", json={"trusted": True}, headers=other_headers)
    assert patched.status_code == status.HTTP_404_NOT_FOUND


def test_update_bot_settings(client, owner_headers) -> None:
    data = _create_bot(client, owner_headers)
    response = client.patch(
        f"/api/v1/bots/{data['id']}",
        json={"name": "Renamed", "trusted": True, "canPublish": True, "canComment": False},
        headers=owner_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()
    assert updated["name"] == "Renamed"
    assert updated["trusted"] is True
    assert updated["canPublish"] is True
    assert updated["canComment"] is False
    assert updated["canDraft"] is True


def test_update_bot_rejects_status_and_key_fields(client, owner_headers) -> None:
    data = _create_bot(client, owner_headers)
    for payload in ({"status": "ACTIVE"}, {"apiKeyHash": "x"}):
        response = client.patch(f"/api/v1/bots/{data['id']}", json=payload, headers=owner_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_permission_change_applies_on_next_request(client, owner_headers, post_factory) -> None:
    data = _create_bot(client, owner_headers)
    headers = {"Authorization": f"Bearer {data['apiKey']}"}
    post_factory(headers)

    client.patch(f"/api/v1/bots/{data['id']}", json={"canDraft": False}, headers=owner_headers)
    response = client.post("/api/v1/posts", json={"title": "x", "body": "y"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_regenerate_key_invalidates_old_key(client, owner_headers) -> None:
    """Scenario: after regeneration the old key fails and the new one works."""
    data = _create_bot(client, owner_headers)
    old_headers = {"Authorization": f"Bearer {data['apiKey']}"}
    assert client.get("/api/v1/me", headers=old_headers).status_code == status.HTTP_200_OK

    response = client.post(f"/api/v1/bots/{data['id']}/regenerate-key", headers=owner_headers)
    assert response.status_code == status.HTTP_200_OK
    regenerated = response.json()
    assert regenerated["apiKey"] != data["apiKey"]
    assert regenerated["hint"] == regenerated["apiKey"][-4:]
    assert "will not be shown again" in regenerated["message"]

    rejected = client.get("/api/v1/me", headers=old_headers)
    assert rejected.status_code == status.HTTP_401_UNAUTHORIZED
    assert rejected.json()["error"] == "Invalid or missing API key"

    new_headers = {"Authorization": f"Bearer {regenerated['apiKey']}"}
    assert client.get("/api/v1/me", headers=new_headers).json()["id"] == data["id"]


def test_revoked_bot_cannot_authenticate(client, owner_headers, post_factory) -> None:
    data = _create_bot(client, owner_headers)
    headers = {"Authorization": f"Bearer {data['apiKey']}"}
    post = post_factory(headers)

    revoked = client.delete(f"/api/v1/bots/{data['id']}", headers=owner_headers)
    assert revoked.status_code == status.HTTP_200_OK
    assert revoked.json() == {
        "id": data["id"],
        "name": "Helper",
        "status": "REVOKED",
        "message": "Bot revoked",
    }

    assert client.get("/api/v1/me", headers=headers).status_code == status.HTTP_401_UNAUTHORIZED
    blocked = client.post("/api/v1/posts", json={"title": "x", "body": "y"}, headers=headers)
    assert blocked.status_code == status.HTTP_401_UNAUTHORIZED

    # Content written before revocation keeps its author.
    detail = client.get(f"/api/v1/posts/{post['id']}", headers=owner_headers).json()
    assert detail["authorId"] == data["id"]


def test_revoked_bot_cannot_be_rekeyed_or_updated(client, owner_headers) -> None:
    data = _create_bot(client, owner_headers)
    client.delete(f"/api/v1/bots/{data['id']}", headers=owner_headers)

    rekey = client.post(f"/api/v1/bots/{data['id']}/regenerate-key", headers=owner_headers)
    assert rekey.status_code == status.HTTP_400_BAD_REQUEST
    update = client.patch(f"/api/v1/bots/{data['id']}", json={"trusted": True}, headers=owner_headers)
    assert update.status_code == status.HTTP_400_BAD_REQUEST

    again = client.delete(f"/api/v1/bots/{data['id']}", headers=owner_headers)
    assert again.status_code == status.HTTP_200_OK
    assert again.json()["status"] == "REVOKED"


def test_bot_stats_count_posts_and_comments(client, owner_headers, post_factory) -> None:
    data = _create_bot(client, owner_headers)
    client.patch(
        f"/api/v1/bots/{data['id']}", json={"trusted": True, "canPublish": True}, headers=owner_headers
    )
    headers = {"Authorization": f"Bearer {data['apiKey']}"}
    post = post_factory(headers)
    client.post(f"/api/v1/posts/{post['id']}/submit", headers=headers)
    client.post(f"/api/v1/posts/{post['id']}/comments", json={"body": "Self reply"}, headers=headers)

    detail = client.get(f"/api/v1/bots/{data['id']}", headers=owner_headers).json()
    assert detail["stats"] == {"posts": 1, "comments": 1}
