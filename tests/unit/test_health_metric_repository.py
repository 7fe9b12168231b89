"""건강 지표 저장소 테스트"""
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from nutrisync.local.repositories.health_metrics import HealthMetricRepository
from nutrisync.utils.enums import HealthMetricType
from nutrisync.utils.time import utcnow

from helpers import OWNER_ID


@pytest.fixture
def repo(local_store) -> HealthMetricRepository:
    return HealthMetricRepository(local_store, OWNER_ID)


@pytest.mark.asyncio
async def test_save_defaults_and_normalizes_time(repo):
    kst = timezone(timedelta(hours=9))
    metric = await repo.save(HealthMetricType.STEPS, 8000, datetime(2024, 3, 2, 8, 0, tzinfo=kst))

    assert metric.metric_type == "steps"
    assert metric.source == "health_connect"
    assert metric.synced is False
    # 09:00 이전 KST 는 전날 UTC
    assert metric.recorded_at == datetime(2024, 3, 1, 23, 0)


@pytest.mark.asyncio
async def test_get_by_range_filters_type(repo):
    await repo.save("steps", 5000, datetime(2024, 3, 1, 20, 0))
    await repo.save("steps", 7000, datetime(2024, 3, 2, 20, 0))
    await repo.save("weight_kg", 70.5, datetime(2024, 3, 2, 7, 0))
    await repo.save("steps", 9000, datetime(2024, 3, 4, 20, 0))

    steps = await repo.get_by_range(HealthMetricType.STEPS, date(2024, 3, 1), date(2024, 3, 2))
    assert [metric.value for metric in steps] == [5000, 7000]


@pytest.mark.asyncio
async def test_get_latest(repo):
    await repo.save("heart_rate_resting", 60, datetime(2024, 3, 1, 6, 0))
    await repo.save("heart_rate_resting", 58, datetime(2024, 3, 3, 6, 0))
    await repo.save("heart_rate_resting", 62, datetime(2024, 3, 2, 6, 0))

    latest = await repo.get_latest("heart_rate_resting")
    assert latest.value == 58
    assert await repo.get_latest("sleep_minutes") is None


@pytest.mark.asyncio
async def test_get_today(repo):
    now = utcnow()
    await repo.save("active_minutes", 30, now)
    await repo.save("active_minutes", 45, now - timedelta(days=2))

    today = await repo.get_today("active_minutes")
    assert [metric.value for metric in today] == [30]


@pytest.mark.asyncio
async def test_drain_and_mark_synced(repo):
    first = await repo.save("steps", 1000, datetime(2024, 3, 1, 9, 0))
    await repo.save("steps", 2000, datetime(2024, 3, 1, 10, 0))

    assert len(await repo.drain_unsynced(limit=1)) == 1

    assert await repo.mark_synced([first]) == 1
    remaining = await repo.drain_unsynced()
    assert [metric.value for metric in remaining] == [2000]


@pytest.mark.asyncio
@pytest.mark.parametrize("metric_type, source", [("steps", "x" * 51), ("steps", ""), ("weight", "manual")])
async def test_save_rejects_values_relay_would_reject(repo, metric_type, source):
    with pytest.raises(ValidationError):
        await repo.save(metric_type, 1, datetime(2024, 3, 1, 9, 0), source=source)

    assert await repo.drain_unsynced() == []
