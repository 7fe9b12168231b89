"""음식 기록 서비스 - food_logs 테이블 (동기화 업서트, 일별 조회, 추이 집계)"""
from datetime import date
from typing import List, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.v1.schemas.food import FoodLogSyncItem, SyncBatchResponse
from nutrisync.core.exceptions import RecordOwnershipError
from nutrisync.db.models import FoodLog
from nutrisync.services.sync_service import upsert_batch
from nutrisync.utils.macros import trend_row
from nutrisync.utils.time import day_bounds, range_bounds


async def upsert_food_log(
    session: AsyncSession,
    owner_id: str,
    item: FoodLogSyncItem,
) -> FoodLog:
    """
    id 기준 업서트

    이미 있으면 변경 가능한 필드와 updated_at을 덮어쓰고 id, created_at은 유지한다.

    Raises:
        RecordOwnershipError: 같은 id가 다른 소유자의 기록일 때
    """
    existing = await session.get(FoodLog, item.id)

    if existing is None:
        log = FoodLog(user_id=owner_id, **item.model_dump())
        session.add(log)
        await session.flush()
        return log

    if existing.user_id != owner_id:
        raise RecordOwnershipError(f"food log {item.id} belongs to another owner")

    for field, value in item.model_dump(exclude={"id", "created_at"}).items():
        setattr(existing, field, value)
    await session.flush()
    return existing


async def sync_food_logs(
    session: AsyncSession,
    owner_id: str,
    items: Sequence[FoodLogSyncItem],
) -> SyncBatchResponse:
    return await upsert_batch(session, owner_id, items, upsert_food_log, kind="food_log")


async def get_food_logs_by_ids(
    session: AsyncSession,
    owner_id: str,
    log_ids: Sequence[str],
) -> List[FoodLog]:
    if not log_ids:
        return []
    result = await session.execute(
        select(FoodLog).where(FoodLog.user_id == owner_id, FoodLog.id.in_(list(log_ids)))
    )
    return list(result.scalars().all())


async def get_daily_food_logs(
    session: AsyncSession,
    owner_id: str,
    day: date,
) -> List[FoodLog]:
    """
    특정 UTC 날짜의 음식 기록 조회

    Args:
        session: DB 세션
        owner_id: 소유자 ID
        day: 조회할 날짜

    Returns:
        logged_at 오름차순 FoodLog 리스트
    """
    start, end = day_bounds(day)
    result = await session.execute(
        select(FoodLog)
        .where(
            FoodLog.user_id == owner_id,
            FoodLog.logged_at >= start,
            FoodLog.logged_at <= end,
        )
        .order_by(FoodLog.logged_at.asc())
    )
    return list(result.scalars().all())


async def get_nutrition_trends(
    session: AsyncSession,
    owner_id: str,
    start_date: date,
    end_date: date,
) -> List[dict]:
    """
    기간 내 일별 영양 합계

    각 매크로에 servings를 곱해서 합산한다. 칼로리는 정수, 나머지는 소수 첫째 자리로 반올림.
    기록이 없는 날짜는 결과에 포함되지 않는다.
    """
    start, end = range_bounds(start_date, end_date)
    day = func.date(FoodLog.logged_at)

    result = await session.execute(
        select(
            day.label("day"),
            func.coalesce(func.sum(FoodLog.calories * FoodLog.servings), 0),
            func.coalesce(func.sum(FoodLog.protein_g * FoodLog.servings), 0),
            func.coalesce(func.sum(FoodLog.carbs_g * FoodLog.servings), 0),
            func.coalesce(func.sum(FoodLog.fat_g * FoodLog.servings), 0),
        )
        .where(
            FoodLog.user_id == owner_id,
            FoodLog.logged_at >= start,
            FoodLog.logged_at <= end,
        )
        .group_by(day)
        .order_by(day)
    )
    return [trend_row(*row) for row in result.all()]
