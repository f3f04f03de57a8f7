"""
Client session agents talking to the real endpoint over ASGI
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from chatweet.client.agent import AgentState, ClientSessionAgent
from chatweet.client.storage import FileKeyValueStore, SessionCache


@pytest_asyncio.fixture
async def make_agent(app, tmp_path):
    agents = []

    def factory(name: str, user_agent: str, screen: str) -> ClientSessionAgent:
        http_client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test/api")
        cache = SessionCache(FileKeyValueStore(str(tmp_path / f"{name}.json")))
        agent = ClientSessionAgent(http_client, cache, user_agent=user_agent, screen=screen)
        agents.append(agent)
        return agent

    yield factory

    for agent in agents:
        await agent.aclose()


@pytest.mark.asyncio
async def test_signing_in_elsewhere_logs_this_device_out(make_agent, test_data):
    alice = test_data.user_id("alice")
    laptop_info = test_data.device("laptop")
    phone_info = test_data.device("phone")
    laptop = make_agent("laptop", laptop_info["userAgent"], laptop_info["screen"])
    phone = make_agent("phone", phone_info["userAgent"], phone_info["screen"])

    await laptop.on_signed_in(alice)
    assert laptop.state == AgentState.authenticated
    assert await laptop.validate_session() is True

    await phone.on_signed_in(alice)
    assert await phone.validate_session() is True

    assert await laptop.validate_session() is False
    assert laptop.state == AgentState.unauthenticated
    assert laptop.cache.load() is None

    sessions = await phone.get_active_sessions(alice)
    assert [s["deviceId"] for s in sessions] == [phone.session.device_id]


@pytest.mark.asyncio
async def test_app_reload_restores_session(make_agent, app, tmp_path, test_data):
    alice = test_data.user_id("alice")
    info = test_data.device("laptop")
    first = make_agent("laptop", info["userAgent"], info["screen"])
    await first.create_session(alice)

    # Same storage file, fresh process
    reloaded = make_agent("laptop", info["userAgent"], info["screen"])
    assert await reloaded.on_app_load(alice) is True
    assert reloaded.session.session_token == first.session.session_token


@pytest.mark.asyncio
async def test_sign_out_ends_session_at_authority(make_agent, test_data):
    alice = test_data.user_id("alice")
    info = test_data.device("laptop")
    agent = make_agent("laptop", info["userAgent"], info["screen"])
    await agent.create_session(alice)
    token = agent.session.session_token
    device_id = agent.session.device_id

    signed_out = []

    async def identity_sign_out():
        signed_out.append(True)

    await agent.sign_out(alice, identity_sign_out)

    assert signed_out == [True]
    assert agent.cache.load() is None
    response = await agent.http_client.post(
        "/session-manager",
        json={"action": "validate_session", "sessionToken": token, "deviceId": device_id},
    )
    assert response.json()["valid"] is False
    assert response.json()["reason"] == "inactive"
