import pytest
from httpx import AsyncClient

from tests.fixtures.auth_flows import bearer, register


@pytest.mark.asyncio
async def test_logout_then_refresh_fails(client: AsyncClient):
    tokens = await register(client)

    response = await client.post(
        "/auth/logout", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == 200
    assert response.json() == {"revoked": True}

    refresh = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert refresh.status_code == 401
    assert refresh.json()["error"]["code"] == "SESSION_REVOKED"

    me = await client.get("/auth/me", headers=bearer(tokens["access_token"]))
    assert me.status_code == 401


@pytest.mark.asyncio
async def test_double_logout_is_ok(client: AsyncClient):
    tokens = await register(client)
    body = {"refresh_token": tokens["refresh_token"]}

    first = await client.post("/auth/logout", json=body)
    second = await client.post("/auth/logout", json=body)

    assert first.status_code == second.status_code == 200
    assert second.json() == {"revoked": False}


@pytest.mark.asyncio
async def test_logout_with_forged_token(client: AsyncClient):
    response = await client.post("/auth/logout", json={"refresh_token": "a.b.c"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"
