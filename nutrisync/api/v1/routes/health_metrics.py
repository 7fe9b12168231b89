"""건강 지표 동기화/조회 API"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.dependencies import get_owner_id
from nutrisync.api.v1.schemas.food import SyncBatchResponse
from nutrisync.api.v1.schemas.health_metric import HealthMetricRead, HealthMetricSyncRequest
from nutrisync.db.session import get_session
from nutrisync.services import health_metric_service
from nutrisync.utils.enums import HealthMetricType

router = APIRouter()


@router.post("/sync", response_model=SyncBatchResponse)
async def sync_health_metrics(
    payload: HealthMetricSyncRequest,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
) -> SyncBatchResponse:
    return await health_metric_service.sync_health_metrics(session, owner_id, payload.metrics)


@router.get("", response_model=List[HealthMetricRead])
async def get_health_metrics(
    start_date: date = Query(...),
    end_date: date = Query(...),
    metric_type: Optional[HealthMetricType] = Query(None),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
) -> List[HealthMetricRead]:
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date는 start_date 이후여야 합니다.")

    metrics = await health_metric_service.get_health_metrics(
        session,
        owner_id,
        start_date,
        end_date,
        metric_type=metric_type.value if metric_type else None,
    )
    return [HealthMetricRead.model_validate(metric) for metric in metrics]
