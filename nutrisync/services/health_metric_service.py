"""건강 지표 서비스 - health_metrics 테이블"""
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.v1.schemas.food import SyncBatchResponse
from nutrisync.api.v1.schemas.health_metric import HealthMetricSyncItem
from nutrisync.core.exceptions import RecordOwnershipError
from nutrisync.db.models import HealthMetric
from nutrisync.services.sync_service import upsert_batch
from nutrisync.utils.time import range_bounds


async def upsert_health_metric(
    session: AsyncSession,
    owner_id: str,
    item: HealthMetricSyncItem,
) -> HealthMetric:
    existing = await session.get(HealthMetric, item.id)

    if existing is None:
        metric = HealthMetric(user_id=owner_id, **item.model_dump())
        session.add(metric)
        await session.flush()
        return metric

    if existing.user_id != owner_id:
        raise RecordOwnershipError(f"health metric {item.id} belongs to another owner")

    for field, value in item.model_dump(exclude={"id", "created_at"}).items():
        setattr(existing, field, value)
    await session.flush()
    return existing


async def sync_health_metrics(
    session: AsyncSession,
    owner_id: str,
    items: Sequence[HealthMetricSyncItem],
) -> SyncBatchResponse:
    return await upsert_batch(session, owner_id, items, upsert_health_metric, kind="health_metric")


async def get_health_metrics(
    session: AsyncSession,
    owner_id: str,
    start_date: date,
    end_date: date,
    metric_type: Optional[str] = None,
) -> List[HealthMetric]:
    """기간 내 건강 지표 (recorded_at 오름차순, metric_type 미지정 시 전체)"""
    start, end = range_bounds(start_date, end_date)
    query = select(HealthMetric).where(
        HealthMetric.user_id == owner_id,
        HealthMetric.recorded_at >= start,
        HealthMetric.recorded_at <= end,
    )
    if metric_type:
        query = query.where(HealthMetric.metric_type == metric_type)

    result = await session.execute(query.order_by(HealthMetric.recorded_at.asc()))
    return list(result.scalars().all())
