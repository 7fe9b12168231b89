"""음식 기록 동기화/조회 API"""
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.dependencies import get_owner_id
from nutrisync.api.v1.schemas.food import (
    DailyNutritionSummary,
    FoodLogRead,
    FoodLogSyncRequest,
    SyncBatchResponse,
)
from nutrisync.db.session import get_session
from nutrisync.services import food_log_service

router = APIRouter()


@router.post("/sync", response_model=SyncBatchResponse)
async def sync_food_logs(
    payload: FoodLogSyncRequest,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
) -> SyncBatchResponse:
    """
    음식 기록 배치 업서트

    레코드마다 따로 커밋한다. 응답의 synced에 있는 id만 클라이언트가 clean 처리한다.
    """
    return await food_log_service.sync_food_logs(session, owner_id, payload.logs)


@router.get("/daily", response_model=List[FoodLogRead])
async def get_daily_food_logs(
    day: date = Query(..., alias="date", description="YYYY-MM-DD (UTC)"),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
) -> List[FoodLogRead]:
    logs = await food_log_service.get_daily_food_logs(session, owner_id, day)
    return [FoodLogRead.model_validate(log) for log in logs]


@router.get("/trends", response_model=List[DailyNutritionSummary])
async def get_nutrition_trends(
    start_date: date = Query(...),
    end_date: date = Query(...),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
) -> List[DailyNutritionSummary]:
    """기간 내 일별 칼로리/매크로 합계 (기록 없는 날은 생략)"""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date는 start_date 이후여야 합니다.")

    rows = await food_log_service.get_nutrition_trends(session, owner_id, start_date, end_date)
    return [DailyNutritionSummary(**row) for row in rows]
