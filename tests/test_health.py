import json
from unittest.mock import AsyncMock

import pytest

from property_listings.errors import ContentStoreError
from property_listings.services.health import check_content_store


@pytest.mark.asyncio
async def test_root_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == "ok"


@pytest.mark.asyncio
async def test_check_content_store_ok(fake_store):
    fake_store.fetch = AsyncMock(return_value=3)
    result = await check_content_store(fake_store)
    assert result["status"] == "ok"
    assert result["documents"] == 3


@pytest.mark.asyncio
async def test_check_content_store_error(fake_store):
    fake_store.fetch = AsyncMock(side_effect=ContentStoreError("boom"))
    result = await check_content_store(fake_store)
    assert result == {"status": "error", "error": "boom"}


@pytest.mark.asyncio
async def test_status_prefers_cached_value(client, monkeypatch):
    redis = AsyncMock()
    redis.get.return_value = json.dumps({"status": "ok", "content_store": {"status": "ok"}})
    monkeypatch.setattr("property_listings.main.redis_client", redis)
    live = AsyncMock()
    monkeypatch.setattr("property_listings.main.get_health", live)

    response = await client.get("/status")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    live.assert_not_called()


@pytest.mark.asyncio
async def test_status_probes_live_without_cache(client, monkeypatch):
    monkeypatch.setattr("property_listings.main.redis_client", None)
    monkeypatch.setattr(
        "property_listings.main.get_health",
        AsyncMock(return_value={"status": "degraded", "content_store": {"status": "error"}}),
    )
    response = await client.get("/status")
    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_update_health_cache_writes_redis(monkeypatch):
    from property_listings import main

    redis = AsyncMock()
    monkeypatch.setattr(main, "redis_client", redis)
    monkeypatch.setattr(main, "get_health", AsyncMock(return_value={"status": "ok"}))
    await main.update_health_cache()
    redis.setex.assert_awaited_once_with(main.HEALTH_CACHE_KEY, main.settings.HEALTH_CACHE_SECONDS, json.dumps({"status": "ok"}))
