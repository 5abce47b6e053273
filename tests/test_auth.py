from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth import MalformedAuthHeader, Unauthorized, authenticate, extract_token


def test_extract_bearer_header() -> None:
    assert extract_token("Bearer s3cret", "") == "s3cret"


def test_header_wins_over_query() -> None:
    assert extract_token("Bearer from-header", "from-query") == "from-header"


def test_query_fallback_when_header_missing() -> None:
    assert extract_token("", "from-query") == "from-query"
    assert extract_token(None, None) == ""


@pytest.mark.parametrize("header", ["s3cret", "bearer s3cret", "Basic czNjcmV0", "Bearer"])
def test_malformed_header(header: str) -> None:
    with pytest.raises(MalformedAuthHeader):
        extract_token(header, "s3cret")


def test_authenticate_accepts_exact_secret() -> None:
    authenticate("s3cret", "s3cret")


@pytest.mark.parametrize("presented", ["", None, "s3cre", "s3cret ", "S3CRET", "s3cret-and-more"])
def test_authenticate_rejects_anything_else(presented: str | None) -> None:
    with pytest.raises(Unauthorized):
        authenticate(presented, "s3cret")


def test_authenticate_handles_non_ascii_credentials() -> None:
    with pytest.raises(Unauthorized):
        authenticate("pässwörd", "s3cret")


def test_checkin_requires_token(client: TestClient, app) -> None:
    resp = client.post("/backup-24h")
    assert resp.status_code == 401
    assert resp.json() == {"detail": "Unauthorized"}
    assert app.state.registry.lookup("backup-24h") is None


def test_checkin_rejects_wrong_token(client: TestClient) -> None:
    resp = client.post("/backup-24h", headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401


def test_checkin_rejects_malformed_header(client: TestClient, settings) -> None:
    resp = client.post("/backup-24h", headers={"Authorization": f"Token {settings.auth_token}"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid Authorization format"}


def test_checkin_accepts_bearer_header(client: TestClient, auth_headers) -> None:
    assert client.post("/backup-24h", headers=auth_headers).status_code == 204


def test_checkin_accepts_query_token(client: TestClient, settings) -> None:
    resp = client.post("/backup-24h", params={"token": settings.auth_token})
    assert resp.status_code == 204


def test_bad_header_is_not_rescued_by_query_token(client: TestClient, settings) -> None:
    resp = client.post(
        "/backup-24h",
        headers={"Authorization": "Bearer wrong"},
        params={"token": settings.auth_token},
    )
    assert resp.status_code == 401


def test_reads_need_no_token(client: TestClient) -> None:
    assert client.get("/backup-24h").status_code == 200
    assert client.get("/").status_code == 200


def test_empty_secret_accepts_nothing() -> None:
    with pytest.raises(Unauthorized):
        authenticate("", "")
