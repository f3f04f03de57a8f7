"""
Integration tests for request handling around the session-manager endpoint:
unknown actions, malformed bodies, CORS, service key.
"""

import pytest
from httpx import AsyncClient

from config import ApplicationConfig

URL = "/api/session-manager"


@pytest.mark.asyncio
async def test_unknown_action(client: AsyncClient):
    response = await client.post(URL, json={"action": "drop_all_sessions"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNKNOWN_ACTION"


@pytest.mark.asyncio
async def test_missing_action(client: AsyncClient):
    response = await client.post(URL, json={"userId": "someone"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "UNKNOWN_ACTION"


@pytest.mark.asyncio
async def test_missing_required_field(client: AsyncClient):
    response = await client.post(URL, json={"action": "create_session", "userId": "someone"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_REQUEST"
    assert "deviceId" in error["message"]


@pytest.mark.asyncio
async def test_empty_field_is_rejected(client: AsyncClient):
    response = await client.post(
        URL, json={"action": "validate_session", "sessionToken": "", "deviceId": "d"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


@pytest.mark.asyncio
async def test_options_returns_empty_ok(client: AsyncClient):
    response = await client.options(URL)

    assert response.status_code == 200
    assert response.content == b""


@pytest.mark.asyncio
async def test_cors_preflight_allows_client_headers(client: AsyncClient):
    response = await client.options(
        URL,
        headers={
            "Origin": "https://chatweet.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, x-client-info, apikey, content-type",
        },
    )

    assert response.status_code == 200
    allowed = response.headers["access-control-allow-headers"].lower()
    for header in ("authorization", "x-client-info", "apikey", "content-type"):
        assert header in allowed


@pytest.mark.asyncio
async def test_cors_header_on_responses(client: AsyncClient):
    response = await client.post(
        URL,
        json={"action": "cleanup_expired"},
        headers={"Origin": "https://chatweet.example"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_service_key_required_when_configured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(ApplicationConfig, "SERVICE_API_KEY", "s3cret")
    body = {"action": "cleanup_expired"}

    missing = await client.post(URL, json=body)
    wrong = await client.post(URL, json=body, headers={"apikey": "nope"})
    via_apikey = await client.post(URL, json=body, headers={"apikey": "s3cret"})
    via_bearer = await client.post(URL, json=body, headers={"Authorization": "Bearer s3cret"})

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"
    assert via_apikey.status_code == 200
    assert via_bearer.status_code == 200


@pytest.mark.asyncio
async def test_non_object_body_is_rejected(client: AsyncClient):
    response = await client.post(URL, json=["create_session"])

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


@pytest.mark.asyncio
async def test_non_json_body_is_rejected(client: AsyncClient):
    response = await client.post(
        URL, content=b"action=create_session", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"
