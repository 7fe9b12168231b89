"""바코드 제품 조회 API"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from nutrisync.api.dependencies import get_openfoodfacts_service, get_owner_id
from nutrisync.api.v1.schemas.barcode import BarcodeProduct
from nutrisync.api.v1.schemas.common import ApiResponse
from nutrisync.core.exceptions import ExternalServiceError
from nutrisync.services.openfoodfacts_service import OpenFoodFactsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{barcode}", response_model=ApiResponse[BarcodeProduct])
async def lookup_barcode(
    barcode: str = Path(..., min_length=8, max_length=14),
    owner_id: str = Depends(get_owner_id),
    service: OpenFoodFactsService = Depends(get_openfoodfacts_service),
) -> ApiResponse[BarcodeProduct]:
    """
    OpenFoodFacts 제품 조회

    등록되지 않은 바코드는 success=True, data=None.
    """
    try:
        product = await service.lookup_barcode(barcode)
    except ExternalServiceError as exc:
        logger.warning("Barcode lookup failed for %s: %s", barcode, exc)
        raise HTTPException(status_code=502, detail="제품 정보를 가져오지 못했습니다. 다시 시도해주세요.")

    if product is None:
        return ApiResponse[BarcodeProduct].ok(message="제품을 찾을 수 없습니다.")
    return ApiResponse[BarcodeProduct].ok(product)
