"""로컬 저장소 → 릴레이 서버 전체 흐름 테스트 (ASGI로 직접 연결)"""
from datetime import datetime

import httpx
import pytest

from nutrisync.api.dependencies import get_openfoodfacts_service
from nutrisync.local.barcode import BarcodeLookup
from nutrisync.local.repositories import FoodItemCreate, FoodItemRepository, FoodLogRepository, HealthMetricRepository
from nutrisync.local.repositories.food_logs import FoodLogCreate, FoodLogUpdate
from nutrisync.local.sync_engine import FitbitPushEngine, food_log_sync_engine, health_metric_sync_engine
from nutrisync.services.openfoodfacts_service import OpenFoodFactsService

from helpers import OWNER_HEADERS, OWNER_ID


def _oatmeal() -> FoodLogCreate:
    return FoodLogCreate(
        meal_type="breakfast",
        source="manual",
        food_name="Oatmeal",
        serving_size="1 cup",
        servings=2,
        calories=150,
        protein_g=5,
        carbs_g=27,
        fat_g=3,
        logged_at=datetime(2024, 3, 1, 7, 30),
    )


@pytest.mark.asyncio
async def test_food_logs_reach_relay_and_are_marked(local_store, relay_client, async_client):
    repo = FoodLogRepository(local_store, OWNER_ID)
    log = await repo.create(_oatmeal())
    engine = food_log_sync_engine(repo, relay_client)

    outcome = await engine.run_once()

    assert outcome.succeeded_ids == [log.id]
    assert (await repo.get(log.id)).synced is True
    assert await repo.drain_unsynced() == []

    response = await async_client.get(
        "/api/v1/food-logs/daily", params={"date": "2024-03-01"}, headers=OWNER_HEADERS
    )
    rows = response.json()
    assert [row["id"] for row in rows] == [log.id]
    assert rows[0]["servings"] == 2

    response = await async_client.get(
        "/api/v1/food-logs/trends",
        params={"start_date": "2024-03-01", "end_date": "2024-03-01"},
        headers=OWNER_HEADERS,
    )
    assert response.json()[0]["calories"] == 300


@pytest.mark.asyncio
async def test_edit_after_sync_is_resent(local_store, relay_client, async_client):
    repo = FoodLogRepository(local_store, OWNER_ID)
    log = await repo.create(_oatmeal())
    engine = food_log_sync_engine(repo, relay_client)
    await engine.run_once()

    await repo.update(log.id, FoodLogUpdate(calories=180))
    outcome = await engine.run_once()

    assert outcome.succeeded_ids == [log.id]
    response = await async_client.get(
        "/api/v1/food-logs/daily", params={"date": "2024-03-01"}, headers=OWNER_HEADERS
    )
    assert response.json()[0]["calories"] == 180


@pytest.mark.asyncio
async def test_health_metrics_reach_relay(local_store, relay_client, async_client):
    repo = HealthMetricRepository(local_store, OWNER_ID)
    await repo.save("steps", 9120, datetime(2024, 3, 1, 21, 0))
    await repo.save("weight_kg", 71.4, datetime(2024, 3, 1, 7, 0), source="manual")

    outcome = await health_metric_sync_engine(repo, relay_client).run_once()

    assert len(outcome.succeeded_ids) == 2
    assert await repo.drain_unsynced() == []
    response = await async_client.get(
        "/api/v1/health-metrics",
        params={"start_date": "2024-03-01", "end_date": "2024-03-01", "metric_type": "weight_kg"},
        headers=OWNER_HEADERS,
    )
    assert [row["value"] for row in response.json()] == [71.4]


@pytest.mark.asyncio
async def test_fitbit_push_not_connected_leaves_logs_unpushed(local_store, relay_client):
    repo = FoodLogRepository(local_store, OWNER_ID)
    log = await repo.create(_oatmeal())
    await food_log_sync_engine(repo, relay_client).run_once()

    outcome = await FitbitPushEngine(repo, relay_client).run_once()

    # Fitbit 미연결이면 릴레이가 오류로 응답 → 다음 주기에 재시도
    assert outcome.pushed_ids == []
    assert outcome.failed_count == 1
    assert (await repo.get(log.id)).pushed is False


@pytest.mark.asyncio
async def test_barcode_lookup_prefers_local_catalog(local_store, relay_client, relay_app):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(
            200,
            json={
                "status": 1,
                "product": {
                    "product_name": "Sparkling Water",
                    "nutriments": {"energy-kcal_100g": 0, "sodium_100g": 0.01},
                },
            },
        )

    relay_app.dependency_overrides[get_openfoodfacts_service] = lambda: OpenFoodFactsService(
        transport=httpx.MockTransport(handler)
    )
    items = FoodItemRepository(local_store, OWNER_ID)
    await items.save(FoodItemCreate(barcode="4006381333931", name="Pencil Snack", calories=120, protein_g=1, carbs_g=20, fat_g=4))
    lookup = BarcodeLookup(items, relay_client)

    local = await lookup.lookup("4006381333931")
    remote = await lookup.lookup("5449000000996")

    assert local.food_name == "Pencil Snack"
    assert remote.food_name == "Sparkling Water"
    assert remote.sodium_mg == 10
    assert calls == ["/api/v2/product/5449000000996.json"]

    await lookup.remember(remote)
    assert (await lookup.lookup("5449000000996")).food_name == "Sparkling Water"
    assert len(calls) == 1
