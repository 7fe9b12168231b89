"""음식 기록 동기화 스키마 - 클라이언트와 서버가 공유"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nutrisync.utils.enums import FoodSource, MealType
from nutrisync.utils.time import to_naive_utc


def uuid_str(value) -> str:
    """UUID 형식 검증 후 소문자 하이픈 표기로 정규화"""
    return str(UUID(str(value)))


class FoodLogSyncItem(BaseModel):
    """배치 업서트 대상 음식 기록 한 건"""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    food_name: str = Field(..., min_length=1, max_length=255)
    meal_type: MealType
    source: FoodSource
    serving_size: str = Field(..., min_length=1, max_length=100)
    servings: float = Field(..., ge=0.25, le=99)
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
    created_at: datetime
    updated_at: datetime

    @field_validator("id")
    @classmethod
    def normalize_id(cls, value: str) -> str:
        return uuid_str(value)

    @field_validator("logged_at", "created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class FoodLogSyncRequest(BaseModel):
    """음식 기록 배치 업서트 요청"""

    logs: List[FoodLogSyncItem] = Field(default_factory=list)


class SyncBatchResponse(BaseModel):
    """배치 업서트 응답 - 성공한 id 목록과 실패 건수"""

    synced: List[str] = Field(default_factory=list)
    failed: int = 0


class FoodLogRead(FoodLogSyncItem):
    """저장된 음식 기록 조회 응답"""

    user_id: str


class DailyNutritionSummary(BaseModel):
    """일별 영양 집계"""

    date: str = Field(..., description="YYYY-MM-DD")
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
