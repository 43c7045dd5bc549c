# tests/test_health.py
from fastapi import status


def test_health_check(client) -> None:
    """The health endpoint reports ok without authentication."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_responds(client) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["docs"] == "/docs"


def test_unknown_route_uses_error_envelope(client) -> None:
    r = client.get("/api/v1/nothing-here")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert "error" in r.json()
