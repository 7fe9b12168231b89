"""건강 지표 동기화 스키마"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nutrisync.api.v1.schemas.food import uuid_str
from nutrisync.utils.enums import HealthMetricType
from nutrisync.utils.time import to_naive_utc


class HealthMetricSyncItem(BaseModel):
    """배치 업서트 대상 건강 지표 한 건"""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    metric_type: HealthMetricType
    value: float
    recorded_at: datetime
    source: str = Field("health_connect", min_length=1, max_length=50)
    created_at: datetime

    @field_validator("id")
    @classmethod
    def normalize_id(cls, value: str) -> str:
        return uuid_str(value)

    @field_validator("recorded_at", "created_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class HealthMetricSyncRequest(BaseModel):
    metrics: List[HealthMetricSyncItem] = Field(default_factory=list)


class HealthMetricRead(HealthMetricSyncItem):
    user_id: str
