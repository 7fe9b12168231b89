"""AI 라벨/사진 분석 스키마"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ScanImageRequest(BaseModel):
    image_base64: str = Field(..., min_length=1, description="base64 인코딩 이미지")
    media_type: str = Field("image/jpeg", description="MIME 타입")


class LabelScanResult(BaseModel):
    food_name: str
    serving_size: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None


class FoodPhotoItem(BaseModel):
    food_name: str
    estimated_portion: str
    confidence: Literal["low", "medium", "high"]
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None


class FoodPhotoResult(BaseModel):
    items: List[FoodPhotoItem] = Field(default_factory=list)
