"""바코드 조회 스키마"""
from typing import Optional

from pydantic import BaseModel


class BarcodeProduct(BaseModel):
    """정규화된 제품 영양 정보 (1회 제공량 기준 우선)"""

    barcode: str
    food_name: str
    brand: Optional[str] = None
    serving_size: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[int] = None
    image_url: Optional[str] = None
