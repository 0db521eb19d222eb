"""Integration tests for app settings endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_settings_start_empty(client: AsyncClient, setup_database):
    response = await client.get("/api/v1/settings")

    assert response.status_code == 200
    assert response.json() == {}


@pytest.mark.asyncio
async def test_put_and_get_setting(client: AsyncClient, setup_database):
    response = await client.put(
        "/api/v1/settings", json={"key": "financial_month_start_day", "value": "25"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "key": "financial_month_start_day", "value": 25}

    response = await client.get("/api/v1/settings")
    assert response.json() == {"financial_month_start_day": 25}


@pytest.mark.asyncio
async def test_put_overwrites_and_refreshes_cache(client: AsyncClient, setup_database):
    await client.get("/api/v1/settings")
    await client.put(
        "/api/v1/settings", json={"key": "ignored_ibans", "value": ["PL61109010140000071219812874"]}
    )
    await client.put("/api/v1/settings", json={"key": "ignored_ibans", "value": []})

    response = await client.get("/api/v1/settings")
    assert response.json() == {"ignored_ibans": []}


@pytest.mark.asyncio
async def test_put_invalid_start_day(client: AsyncClient, setup_database):
    response = await client.put(
        "/api/v1/settings", json={"key": "financial_month_start_day", "value": 42}
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "SET_001"


@pytest.mark.asyncio
async def test_put_invalid_ignored_ibans(client: AsyncClient, setup_database):
    response = await client.put(
        "/api/v1/settings", json={"key": "ignored_ibans", "value": "PL61109010140000071219812874"}
    )

    assert response.status_code == 400
