"""Fitbit 연동 API (OAuth 연결, 상태, 음식 기록 전송)"""
import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.dependencies import get_fitbit_service, get_owner_id
from nutrisync.api.v1.schemas.fitbit import (
    FitbitAuthorizeResponse,
    FitbitConnectRequest,
    FitbitPushRequest,
    FitbitPushResponse,
    FitbitStatusResponse,
)
from nutrisync.core.config import Settings, get_settings
from nutrisync.core.exceptions import FitbitError, FitbitNotConnectedError, FitbitTokenRefreshError
from nutrisync.db.session import get_session
from nutrisync.services import fitbit_sync_service
from nutrisync.services.fitbit_service import FitbitService
from nutrisync.utils.enums import FitbitConnectionState

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/status", response_model=FitbitStatusResponse)
async def get_fitbit_status(
    owner_id: str = Depends(get_owner_id),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_session),
) -> FitbitStatusResponse:
    return await fitbit_sync_service.get_status(session, settings, owner_id)


@router.get("/authorize", response_model=FitbitAuthorizeResponse)
async def get_authorization_url(
    state: Optional[str] = Query(None, max_length=200),
    service: FitbitService = Depends(get_fitbit_service),
) -> FitbitAuthorizeResponse:
    """Fitbit 동의 화면 URL (state 미지정 시 임의 생성)"""
    return FitbitAuthorizeResponse(
        authorization_url=service.get_authorization_url(state or secrets.token_urlsafe(16))
    )


@router.get("/callback", include_in_schema=False)
async def fitbit_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    settings: Settings = Depends(get_settings),
) -> RedirectResponse:
    """
    Fitbit OAuth 리다이렉트 수신

    브라우저에서 호출되므로 소유자 헤더가 없다. code/state를 앱 딥링크로 넘기고,
    앱이 POST /fitbit/connect 로 교환한다.
    """
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    query = urlencode({"code": code, "state": state or ""})
    return RedirectResponse(url=f"{settings.fitbit_app_redirect_uri}?{query}", status_code=302)


@router.post("/connect", response_model=FitbitStatusResponse)
async def connect_fitbit(
    payload: FitbitConnectRequest,
    owner_id: str = Depends(get_owner_id),
    service: FitbitService = Depends(get_fitbit_service),
    session: AsyncSession = Depends(get_session),
) -> FitbitStatusResponse:
    try:
        token = await fitbit_sync_service.connect(session, service, owner_id, payload.code)
    except FitbitError as exc:
        logger.warning("Fitbit connect failed for owner %s: %s", owner_id, exc)
        raise HTTPException(status_code=502, detail="Fitbit 연결에 실패했습니다. 다시 시도해주세요.")

    return FitbitStatusResponse(
        state=FitbitConnectionState.CONNECTED,
        fitbit_user_id=token.fitbit_user_id,
        expires_at=token.expires_at,
    )


@router.delete("/connection", response_model=FitbitStatusResponse)
async def disconnect_fitbit(
    owner_id: str = Depends(get_owner_id),
    settings: Settings = Depends(get_settings),
    session: AsyncSession = Depends(get_session),
) -> FitbitStatusResponse:
    await fitbit_sync_service.disconnect(session, owner_id)
    return await fitbit_sync_service.get_status(session, settings, owner_id)


@router.post("/push", response_model=FitbitPushResponse)
async def push_to_fitbit(
    payload: FitbitPushRequest,
    owner_id: str = Depends(get_owner_id),
    service: FitbitService = Depends(get_fitbit_service),
    session: AsyncSession = Depends(get_session),
) -> FitbitPushResponse:
    """
    음식 기록을 Fitbit에 전송

    응답의 pushed에 있는 id만 클라이언트가 pushed 처리한다.
    토큰 갱신이 실패하면 502, 연결되지 않았으면 409.
    """
    try:
        return await fitbit_sync_service.push_food_logs(session, service, owner_id, payload.log_ids)
    except FitbitNotConnectedError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except FitbitTokenRefreshError:
        raise HTTPException(status_code=502, detail="Fitbit 토큰 갱신에 실패했습니다. 다시 연결해주세요.")
