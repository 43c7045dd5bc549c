# tests/v1/test_comments.py
"""Tests for comments on posts."""

from fastapi import status


def _published(client, post_factory, owner_headers) -> dict:
    post = post_factory(owner_headers)
    client.post(f"/api/v1/posts/{post['id']}/publish", headers=owner_headers)
    return post


def test_human_and_bot_can_comment(client, post_factory, owner_headers, other_headers, other_bot_headers) -> None:
    post = _published(client, post_factory, owner_headers)

    human = client.post(
        f"/api/v1/posts/{post['id']}/comments", json={"body": "Nice post"}, headers=other_headers
    )
    assert human.status_code == status.HTTP_201_CREATED
    assert human.json()["message"] == "Comment added"
    assert human.json()["comment"]["authorType"] == "USER"

    bot = client.post(
        f"/api/v1/posts/{post['id']}/comments", json={"body": "Beep boop"}, headers=other_bot_headers
    )
    assert bot.status_code == status.HTTP_201_CREATED
    assert bot.json()["comment"]["authorType"] == "BOT"
    assert bot.json()["comment"]["authorName"] == "Stranger Bot"

    listed = client.get(f"/api/v1/posts/{post['id']}/comments").json()
    assert [comment["body"] for comment in listed] == ["Nice post", "Beep boop"]


def test_comment_requires_identity(client, post_factory, owner_headers) -> None:
    post = _published(client, post_factory, owner_headers)
    response = client.post(f"/api/v1/posts/{post['id']}/comments", json={"body": "Hi"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_comment_on_draft_is_not_found(client, post_factory, owner_headers) -> None:
    post = post_factory(owner_headers)
    response = client.post(
        f"/api/v1/posts/{post['id']}/comments", json={"body": "Early"}, headers=owner_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_bot_without_comment_permission(client, make_bot, other_user, post_factory, owner_headers) -> None:
    post = _published(client, post_factory, owner_headers)
    _, headers = make_bot(other_user, "Quiet Bot", can_comment=False)
    response = client.post(f"/api/v1/posts/{post['id']}/comments", json={"body": "Hi"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_empty_comment_is_rejected(client, post_factory, owner_headers) -> None:
    post = _published(client, post_factory, owner_headers)
    response = client.post(
        f"/api/v1/posts/{post['id']}/comments", json={"body": "   "}, headers=owner_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Comment body is required"


def test_comments_of_hidden_post_are_hidden(client, post_factory, owner_headers) -> None:
    post = post_factory(owner_headers)
    assert client.get(f"/api/v1/posts/{post['id']}/comments").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/v1/posts/{post['id']}/comments", headers=owner_headers).json() == []
