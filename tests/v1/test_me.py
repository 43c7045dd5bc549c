# tests/v1/test_me.py
"""Tests for the bot self-profile endpoint."""

from fastapi import status


def test_me_describes_calling_bot(client, draft_bot, owner) -> None:
    bot, headers = draft_bot
    response = client.get("/api/v1/me", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == bot.id
    assert data["name"] == "Draft Bot"
    assert data["status"] == "ACTIVE"
    assert data["permissions"] == {"canDraft": True, "canPublish": False, "canComment": True}
    assert data["owner"] == {"id": owner.id, "name": "Olivia Owner"}
    assert data["stats"] == {"posts": 0, "comments": 0}


def test_me_requires_bot_key(client, owner_headers) -> None:
    assert client.get("/api/v1/me").status_code == status.HTTP_401_UNAUTHORIZED
    response = client.get("/api/v1/me", headers=owner_headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Invalid or missing API key"


def test_me_rejects_malformed_key(client) -> None:
    response = client.get("/api/v1/me", headers={"Authorization": "Bearer bot_short"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
