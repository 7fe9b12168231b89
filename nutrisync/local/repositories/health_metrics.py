"""건강 지표 저장소 - health_metrics 테이블"""
import uuid
from datetime import date, datetime
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import select, update

from nutrisync.local.models import LocalHealthMetric
from nutrisync.local.repositories.base import Repository
from nutrisync.utils.enums import HealthMetricType
from nutrisync.utils.time import day_bounds, range_bounds, to_naive_utc, utcnow


def _metric_value(metric_type) -> str:
    return metric_type.value if isinstance(metric_type, HealthMetricType) else str(metric_type)


class HealthMetricCreate(BaseModel):
    """저장 전 검증 - HealthMetricSyncItem과 같은 범위"""

    model_config = ConfigDict(use_enum_values=True)

    metric_type: HealthMetricType
    value: float
    recorded_at: datetime
    source: str = Field("health_connect", min_length=1, max_length=50)

    @field_validator("recorded_at")
    @classmethod
    def normalize_recorded_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class HealthMetricRepository(Repository):

    async def save(
        self,
        metric_type: HealthMetricType | str,
        value: float,
        recorded_at: datetime,
        source: str = "health_connect",
    ) -> LocalHealthMetric:
        """
        Raises:
            ValidationError: 알 수 없는 지표 유형, 1~50자를 벗어난 source
        """
        data = HealthMetricCreate(
            metric_type=_metric_value(metric_type),
            value=value,
            recorded_at=recorded_at,
            source=source,
        )
        metric = LocalHealthMetric(
            id=str(uuid.uuid4()),
            user_id=self.owner_id,
            synced=False,
            created_at=utcnow(),
            **data.model_dump(),
        )
        async with self.store.session() as session:
            session.add(metric)
            await session.commit()
        return metric

    async def get_by_range(
        self,
        metric_type: HealthMetricType | str,
        start_date: date,
        end_date: date,
    ) -> List[LocalHealthMetric]:
        start, end = range_bounds(start_date, end_date)
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalHealthMetric)
                .where(
                    LocalHealthMetric.user_id == self.owner_id,
                    LocalHealthMetric.metric_type == _metric_value(metric_type),
                    LocalHealthMetric.recorded_at >= start,
                    LocalHealthMetric.recorded_at <= end,
                )
                .order_by(LocalHealthMetric.recorded_at.asc())
            )
            return list(result.scalars().all())

    async def get_latest(self, metric_type: HealthMetricType | str) -> Optional[LocalHealthMetric]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalHealthMetric)
                .where(
                    LocalHealthMetric.user_id == self.owner_id,
                    LocalHealthMetric.metric_type == _metric_value(metric_type),
                )
                .order_by(LocalHealthMetric.recorded_at.desc())
                .limit(1)
            )
            return result.scalars().first()

    async def get_today(self, metric_type: HealthMetricType | str) -> List[LocalHealthMetric]:
        """오늘(UTC) 기록"""
        start, end = day_bounds(utcnow().date())
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalHealthMetric)
                .where(
                    LocalHealthMetric.user_id == self.owner_id,
                    LocalHealthMetric.metric_type == _metric_value(metric_type),
                    LocalHealthMetric.recorded_at >= start,
                    LocalHealthMetric.recorded_at <= end,
                )
                .order_by(LocalHealthMetric.recorded_at.asc())
            )
            return list(result.scalars().all())

    async def drain_unsynced(
        self,
        limit: int = 100,
        exclude_ids: Iterable[str] = (),
    ) -> List[LocalHealthMetric]:
        query = select(LocalHealthMetric).where(
            LocalHealthMetric.user_id == self.owner_id,
            LocalHealthMetric.synced.is_(False),
        )
        excluded = list(exclude_ids)
        if excluded:
            query = query.where(LocalHealthMetric.id.not_in(excluded))

        async with self.store.session() as session:
            result = await session.execute(query.order_by(LocalHealthMetric.created_at.asc()).limit(limit))
            return list(result.scalars().all())

    async def mark_synced(self, records: Iterable[LocalHealthMetric]) -> int:
        # 건강 지표는 수정 경로가 없으므로 id만 비교
        ids = [record.id for record in records]
        if not ids:
            return 0
        async with self.store.session() as session:
            result = await session.execute(
                update(LocalHealthMetric)
                .where(LocalHealthMetric.user_id == self.owner_id, LocalHealthMetric.id.in_(ids))
                .values(synced=True)
            )
            await session.commit()
            return result.rowcount or 0
