"""
Tests for the identity gate: bearer tokens, roles and restricted accounts.
"""

import pytest
from datetime import timedelta

from backend.app.core.account_restriction import restrict_account, restricted_account_key
from backend.app.core.jwt import create_access_token
from backend.app.models.enums import UserRole


@pytest.mark.asyncio
async def test_missing_token_is_unauthorized(client):
    response = await client.get("/v1/parcels")

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_UNAUTHORIZED"


@pytest.mark.asyncio
async def test_garbage_token_is_forbidden(client):
    response = await client.get("/v1/parcels", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 403
    assert response.json()["message"].startswith("Forbidden access")


@pytest.mark.asyncio
async def test_expired_token_is_forbidden(client, token_factory):
    token = token_factory("merchant@parcels.io", UserRole.MERCHANT, expires_delta=timedelta(minutes=-5))

    response = await client.get("/v1/parcels", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_restricted_account_is_forbidden(client, merchant_headers):
    assert (await client.get("/v1/parcels", headers=merchant_headers)).status_code == 200

    assert await restrict_account("Merchant@Parcels.io") is True

    response = await client.get("/v1/parcels", headers=merchant_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Account has been restricted"


@pytest.mark.asyncio
async def test_restriction_key_is_case_insensitive(redis_client_session):
    await redis_client_session.set(restricted_account_key("Rider@Parcels.io"), "1")

    assert "account:restricted:rider@parcels.io" in redis_client_session.store


@pytest.mark.asyncio
async def test_unknown_role_is_forbidden(client, parcel_payload):
    token = create_access_token({"sub": "who@parcels.io", "role": "SUPERUSER"})

    response = await client.post(
        "/v1/parcels", json=parcel_payload(), headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_health_is_public(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
