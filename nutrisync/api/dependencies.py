"""API 의존성"""
from uuid import UUID

from fastapi import Depends, Header, HTTPException

from nutrisync.core.config import Settings, get_settings
from nutrisync.core.exceptions import ConfigurationError
from nutrisync.services.fitbit_service import FitbitService
from nutrisync.services.openfoodfacts_service import OpenFoodFactsService
from nutrisync.services.vision_service import GPTVisionService, get_vision_service


async def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """
    요청 소유자 의존성

    단일 사용자 앱이므로 인증 대신 X-Owner-Id 헤더(UUID)로 소유자를 식별한다.
    사용 예:
        @router.get("/daily")
        async def daily(owner_id: str = Depends(get_owner_id)):
            ...
    """
    if not x_owner_id:
        raise HTTPException(status_code=401, detail="X-Owner-Id 헤더가 필요합니다.")
    try:
        return str(UUID(x_owner_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="유효하지 않은 X-Owner-Id 입니다.")


def get_fitbit_service(settings: Settings = Depends(get_settings)) -> FitbitService:
    """Fitbit 미설정 서버는 해당 요청만 503"""
    try:
        return FitbitService.from_settings(settings)
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc))


def get_openfoodfacts_service(settings: Settings = Depends(get_settings)) -> OpenFoodFactsService:
    return OpenFoodFactsService(
        base_url=settings.openfoodfacts_base_url,
        user_agent=settings.openfoodfacts_user_agent,
        timeout=settings.http_timeout_seconds,
    )


def get_scan_service() -> GPTVisionService:
    try:
        return get_vision_service()
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
