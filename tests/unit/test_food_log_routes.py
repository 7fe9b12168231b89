"""음식 기록 동기화/조회 라우트 테스트"""
from datetime import datetime

import pytest
from sqlalchemy import func, select

from nutrisync.db.models import FoodLog

from helpers import LOG_ID_1, LOG_ID_2, LOG_ID_3, OTHER_OWNER_ID, OWNER_HEADERS, food_log_payload


async def _row_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(FoodLog))).scalar_one()


class TestFoodLogSync:

    @pytest.mark.asyncio
    async def test_requires_owner_header(self, async_client):
        response = await async_client.post("/api/v1/food-logs/sync", json={"logs": []})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_rejects_invalid_owner_header(self, async_client):
        response = await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": []},
            headers={"X-Owner-Id": "not-a-uuid"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_batch_upsert(self, async_client, session_factory):
        response = await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": [food_log_payload(LOG_ID_1), food_log_payload(LOG_ID_2, meal_type="lunch")]},
            headers=OWNER_HEADERS,
        )

        assert response.status_code == 200
        assert response.json() == {"synced": [LOG_ID_1, LOG_ID_2], "failed": 0}
        assert await _row_count(session_factory) == 2

    @pytest.mark.asyncio
    async def test_upsert_is_idempotent(self, async_client, session_factory):
        """같은 id를 두 번 보내도 한 행, 두 번째 값으로 덮어쓰고 created_at은 유지"""
        first = food_log_payload(LOG_ID_1)
        second = food_log_payload(
            LOG_ID_1,
            food_name="Greek Yogurt with Honey",
            calories=210,
            created_at="2024-03-05T00:00:00Z",
            updated_at="2024-03-01T09:30:00Z",
        )

        for payload in (first, second):
            response = await async_client.post(
                "/api/v1/food-logs/sync", json={"logs": [payload]}, headers=OWNER_HEADERS
            )
            assert response.json()["synced"] == [LOG_ID_1]

        assert await _row_count(session_factory) == 1
        async with session_factory() as session:
            log = await session.get(FoodLog, LOG_ID_1)
        assert log.food_name == "Greek Yogurt with Honey"
        assert log.calories == 210
        assert log.created_at == datetime(2024, 3, 1, 8, 0, 5)
        assert log.updated_at == datetime(2024, 3, 1, 9, 30)

    @pytest.mark.asyncio
    async def test_collision_with_other_owner_fails_only_that_record(self, async_client, session_factory):
        await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": [food_log_payload(LOG_ID_1)]},
            headers={"X-Owner-Id": OTHER_OWNER_ID},
        )

        response = await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": [food_log_payload(LOG_ID_1, food_name="hijack"), food_log_payload(LOG_ID_2)]},
            headers=OWNER_HEADERS,
        )

        assert response.json() == {"synced": [LOG_ID_2], "failed": 1}
        async with session_factory() as session:
            log = await session.get(FoodLog, LOG_ID_1)
        assert log.user_id == OTHER_OWNER_ID
        assert log.food_name == "Greek Yogurt"

    @pytest.mark.asyncio
    async def test_invalid_payload_rejected(self, async_client):
        response = await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": [food_log_payload(LOG_ID_1, servings=0.1)]},
            headers=OWNER_HEADERS,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_timestamps_normalized_to_utc(self, async_client, session_factory):
        await async_client.post(
            "/api/v1/food-logs/sync",
            json={"logs": [food_log_payload(LOG_ID_1, logged_at="2024-03-02T07:30:00+09:00")]},
            headers=OWNER_HEADERS,
        )

        async with session_factory() as session:
            log = await session.get(FoodLog, LOG_ID_1)
        assert log.logged_at == datetime(2024, 3, 1, 22, 30)


class TestFoodLogQueries:

    async def _seed(self, async_client, *logs):
        response = await async_client.post("/api/v1/food-logs/sync", json={"logs": list(logs)}, headers=OWNER_HEADERS)
        assert response.json()["failed"] == 0

    @pytest.mark.asyncio
    async def test_daily_returns_rows_for_utc_day(self, async_client):
        await self._seed(
            async_client,
            food_log_payload(LOG_ID_1, logged_at="2024-03-01T23:59:59.999Z"),
            food_log_payload(LOG_ID_2, logged_at="2024-03-01T00:00:00Z"),
            food_log_payload(LOG_ID_3, logged_at="2024-03-02T00:00:00Z"),
        )

        response = await async_client.get("/api/v1/food-logs/daily", params={"date": "2024-03-01"}, headers=OWNER_HEADERS)

        assert response.status_code == 200
        assert [row["id"] for row in response.json()] == [LOG_ID_2, LOG_ID_1]

    @pytest.mark.asyncio
    async def test_daily_is_owner_scoped(self, async_client):
        await self._seed(async_client, food_log_payload(LOG_ID_1))

        response = await async_client.get(
            "/api/v1/food-logs/daily",
            params={"date": "2024-03-01"},
            headers={"X-Owner-Id": OTHER_OWNER_ID},
        )
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_trends_aggregate_with_servings(self, async_client):
        """100kcal×2 + 50kcal×1 = 250"""
        await self._seed(
            async_client,
            food_log_payload(LOG_ID_1, calories=100, protein_g=10, carbs_g=12.25, fat_g=1, servings=2),
            food_log_payload(LOG_ID_2, calories=50, protein_g=5, carbs_g=0, fat_g=0, servings=1,
                             logged_at="2024-03-01T19:00:00Z"),
            food_log_payload(LOG_ID_3, calories=80, protein_g=1, carbs_g=1, fat_g=1, logged_at="2024-03-04T12:00:00Z"),
        )

        response = await async_client.get(
            "/api/v1/food-logs/trends",
            params={"start_date": "2024-03-01", "end_date": "2024-03-04"},
            headers=OWNER_HEADERS,
        )

        assert response.status_code == 200
        assert response.json() == [
            {"date": "2024-03-01", "calories": 250, "protein_g": 25.0, "carbs_g": 24.5, "fat_g": 2.0},
            {"date": "2024-03-04", "calories": 80, "protein_g": 1.0, "carbs_g": 1.0, "fat_g": 1.0},
        ]

    @pytest.mark.asyncio
    async def test_trends_rejects_inverted_range(self, async_client):
        response = await async_client.get(
            "/api/v1/food-logs/trends",
            params={"start_date": "2024-03-04", "end_date": "2024-03-01"},
            headers=OWNER_HEADERS,
        )
        assert response.status_code == 400
