"""음식 기록 저장소 - food_logs 테이블"""
import uuid
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import delete, func, select, update

from nutrisync.local.models import LocalFoodLog
from nutrisync.local.repositories.base import Repository
from nutrisync.utils.enums import FoodSource, MealType
from nutrisync.utils.macros import trend_row
from nutrisync.utils.time import day_bounds, range_bounds, to_naive_utc, utcnow


class FoodLogCreate(BaseModel):
    """
    새 음식 기록 입력 (id, 타임스탬프, 플래그는 저장소가 채움)

    범위는 릴레이 전송 스키마(FoodLogSyncItem)와 같다. 저장된 기록은 항상 전송 가능해야 한다.
    """

    model_config = ConfigDict(use_enum_values=True)

    meal_type: MealType
    source: FoodSource
    food_name: str = Field(..., min_length=1, max_length=255)
    serving_size: str = Field(..., min_length=1, max_length=100)
    servings: float = Field(1, ge=0.25, le=99)
    calories: float = Field(..., ge=0)
    protein_g: float = Field(..., ge=0)
    carbs_g: float = Field(..., ge=0)
    fat_g: float = Field(..., ge=0)
    fiber_g: Optional[float] = Field(None, ge=0)
    sugar_g: Optional[float] = Field(None, ge=0)
    sodium_mg: Optional[float] = Field(None, ge=0)
    photo_url: Optional[str] = Field(None, max_length=500)
    ai_confidence: Optional[float] = Field(None, ge=0, le=1)
    logged_at: datetime

    @field_validator("logged_at")
    @classmethod
    def normalize_logged_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class FoodLogUpdate(BaseModel):
    """부분 수정 가능한 필드 목록 - 여기 없는 필드는 거부"""

    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    meal_type: Optional[MealType] = None
    food_name: Optional[str] = Field(None, min_length=1, max_length=255)
    serving_size: Optional[str] = Field(None, min_length=1, max_length=100)
    servings: Optional[float] = Field(None, ge=0.25, le=99)
    calories: Optional[float] = Field(None, ge=0)
    protein_g: Optional[float] = Field(None, ge=0)
    carbs_g: Optional[float] = Field(None, ge=0)
    fat_g: Optional[float] = Field(None, ge=0)
    fiber_g: Optional[float] = Field(None, ge=0)
    sugar_g: Optional[float] = Field(None, ge=0)
    sodium_mg: Optional[float] = Field(None, ge=0)
    logged_at: Optional[datetime] = None

    @field_validator("logged_at")
    @classmethod
    def normalize_logged_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else None


class FoodLogRepository(Repository):
    """음식 기록 CRUD + 동기화 큐"""

    async def create(self, data: FoodLogCreate) -> LocalFoodLog:
        """
        음식 기록 생성

        synced/pushed는 항상 False로 시작한다. 저장 후 다시 읽지 않고 생성한 객체를 반환.
        """
        now = utcnow()
        log = LocalFoodLog(
            id=str(uuid.uuid4()),
            user_id=self.owner_id,
            pushed=False,
            synced=False,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        async with self.store.session() as session:
            session.add(log)
            await session.commit()
        return log

    async def get(self, log_id: str) -> Optional[LocalFoodLog]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodLog).where(
                    LocalFoodLog.id == log_id,
                    LocalFoodLog.user_id == self.owner_id,
                )
            )
            return result.scalar_one_or_none()

    async def get_by_date(self, day: date) -> List[LocalFoodLog]:
        """해당 UTC 날짜의 기록 (logged_at 오름차순)"""
        start, end = day_bounds(day)
        return await self._between(start, end)

    async def get_by_range(self, start_date: date, end_date: date) -> List[LocalFoodLog]:
        start, end = range_bounds(start_date, end_date)
        return await self._between(start, end)

    async def _between(self, start: datetime, end: datetime) -> List[LocalFoodLog]:
        async with self.store.session() as session:
            result = await session.execute(
                select(LocalFoodLog)
                .where(
                    LocalFoodLog.user_id == self.owner_id,
                    LocalFoodLog.logged_at >= start,
                    LocalFoodLog.logged_at <= end,
                )
                .order_by(LocalFoodLog.logged_at.asc())
            )
            return list(result.scalars().all())

    async def update(self, log_id: str, changes: FoodLogUpdate) -> None:
        """
        전달된 필드만 갱신

        updated_at은 항상 갱신되고 synced는 False로 돌아간다. pushed는 건드리지 않는다.
        없는 id면 아무 일도 일어나지 않는다.
        """
        values = changes.model_dump(exclude_unset=True)
        values["updated_at"] = utcnow()
        values["synced"] = False

        async with self.store.session() as session:
            await session.execute(
                update(LocalFoodLog)
                .where(LocalFoodLog.id == log_id, LocalFoodLog.user_id == self.owner_id)
                .values(**values)
            )
            await session.commit()

    async def delete(self, log_id: str) -> None:
        """로컬에서만 삭제 (원격 삭제 전파 없음)"""
        async with self.store.session() as session:
            await session.execute(
                delete(LocalFoodLog).where(
                    LocalFoodLog.id == log_id,
                    LocalFoodLog.user_id == self.owner_id,
                )
            )
            await session.commit()

    async def drain_unsynced(
        self,
        limit: int = 100,
        exclude_ids: Iterable[str] = (),
    ) -> List[LocalFoodLog]:
        """동기화 대기 기록 (생성 순서대로, 최대 limit건). exclude_ids는 건너뜀"""
        query = select(LocalFoodLog).where(
            LocalFoodLog.user_id == self.owner_id,
            LocalFoodLog.synced.is_(False),
        )
        excluded = list(exclude_ids)
        if excluded:
            query = query.where(LocalFoodLog.id.not_in(excluded))

        async with self.store.session() as session:
            result = await session.execute(query.order_by(LocalFoodLog.created_at.asc()).limit(limit))
            return list(result.scalars().all())

    async def mark_synced(self, records: Iterable[LocalFoodLog]) -> int:
        """
        서버가 확인한 기록을 synced로 표시

        전송 이후 다시 수정된 기록은 updated_at이 달라 그대로 dirty 상태로 남는다.

        Returns:
            실제로 표시된 건수
        """
        marked = 0
        for record in records:
            async with self.store.session() as session:
                result = await session.execute(
                    update(LocalFoodLog)
                    .where(
                        LocalFoodLog.id == record.id,
                        LocalFoodLog.user_id == self.owner_id,
                        LocalFoodLog.updated_at == record.updated_at,
                    )
                    .values(synced=True)
                )
                await session.commit()
                marked += result.rowcount or 0
        return marked

    async def get_unpushed(
        self,
        ids: Optional[Sequence[str]] = None,
        limit: int = 50,
    ) -> List[LocalFoodLog]:
        """Fitbit 전송 대상: 서버 동기화는 끝났고 아직 push 안 된 기록"""
        query = select(LocalFoodLog).where(
            LocalFoodLog.user_id == self.owner_id,
            LocalFoodLog.pushed.is_(False),
            LocalFoodLog.synced.is_(True),
        )
        if ids is not None:
            if not ids:
                return []
            query = query.where(LocalFoodLog.id.in_(list(ids)))
        query = query.order_by(LocalFoodLog.logged_at.asc()).limit(limit)

        async with self.store.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def mark_pushed(self, ids: Sequence[str]) -> None:
        if not ids:
            return
        async with self.store.session() as session:
            await session.execute(
                update(LocalFoodLog)
                .where(LocalFoodLog.user_id == self.owner_id, LocalFoodLog.id.in_(list(ids)))
                .values(pushed=True)
            )
            await session.commit()

    async def get_trends(self, start_date: date, end_date: date) -> List[dict]:
        """일별 영양 합계 (servings 배수 적용, 기록 없는 날은 빠짐)"""
        start, end = range_bounds(start_date, end_date)
        day = func.date(LocalFoodLog.logged_at)

        async with self.store.session() as session:
            result = await session.execute(
                select(
                    day.label("day"),
                    func.sum(LocalFoodLog.calories * LocalFoodLog.servings),
                    func.sum(LocalFoodLog.protein_g * LocalFoodLog.servings),
                    func.sum(LocalFoodLog.carbs_g * LocalFoodLog.servings),
                    func.sum(LocalFoodLog.fat_g * LocalFoodLog.servings),
                )
                .where(
                    LocalFoodLog.user_id == self.owner_id,
                    LocalFoodLog.logged_at >= start,
                    LocalFoodLog.logged_at <= end,
                )
                .group_by(day)
                .order_by(day)
            )
            return [trend_row(*row) for row in result.all()]
