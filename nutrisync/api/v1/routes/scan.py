"""AI 영양 라벨/음식 사진 분석 API"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from nutrisync.api.dependencies import get_owner_id, get_scan_service
from nutrisync.api.v1.schemas.common import ApiResponse
from nutrisync.api.v1.schemas.scan import FoodPhotoResult, LabelScanResult, ScanImageRequest
from nutrisync.core.exceptions import AIResponseValidationError, ExternalServiceError
from nutrisync.services.vision_service import GPTVisionService

logger = logging.getLogger(__name__)

router = APIRouter()

RETRY_MESSAGE = "분석 결과를 읽지 못했습니다. 다시 시도해주세요."


@router.post("/label", response_model=ApiResponse[LabelScanResult])
async def scan_label(
    payload: ScanImageRequest,
    owner_id: str = Depends(get_owner_id),
    service: GPTVisionService = Depends(get_scan_service),
) -> ApiResponse[LabelScanResult]:
    """영양성분표 이미지 → 1회 제공량 기준 영양 정보"""
    try:
        result = await service.scan_nutrition_label(payload.image_base64, payload.media_type)
    except AIResponseValidationError:
        raise HTTPException(status_code=502, detail=RETRY_MESSAGE)
    except ExternalServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return ApiResponse[LabelScanResult].ok(result)


@router.post("/photo", response_model=ApiResponse[FoodPhotoResult])
async def scan_photo(
    payload: ScanImageRequest,
    owner_id: str = Depends(get_owner_id),
    service: GPTVisionService = Depends(get_scan_service),
) -> ApiResponse[FoodPhotoResult]:
    """음식 사진 → 음식별 추정 분량/영양 정보"""
    try:
        result = await service.analyze_food_photo(payload.image_base64, payload.media_type)
    except AIResponseValidationError:
        raise HTTPException(status_code=502, detail=RETRY_MESSAGE)
    except ExternalServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return ApiResponse[FoodPhotoResult].ok(result)
