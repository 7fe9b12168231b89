"""Fitbit 연동 상태/토큰 관리 및 음식 기록 전송 - fitbit_tokens 테이블"""
import logging
from datetime import timedelta
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.v1.schemas.fitbit import FitbitPushResponse, FitbitStatusResponse
from nutrisync.core.config import Settings
from nutrisync.core.exceptions import FitbitError, FitbitNotConnectedError, FitbitTokenRefreshError
from nutrisync.db.models import FitbitToken
from nutrisync.services.fitbit_service import FitbitService, FitbitTokens, meal_type_to_fitbit_id
from nutrisync.services.food_log_service import get_food_logs_by_ids
from nutrisync.utils.enums import FitbitConnectionState
from nutrisync.utils.time import utcnow

logger = logging.getLogger(__name__)


async def get_token(session: AsyncSession, owner_id: str) -> Optional[FitbitToken]:
    return await session.get(FitbitToken, owner_id)


async def get_status(
    session: AsyncSession,
    settings: Settings,
    owner_id: str,
) -> FitbitStatusResponse:
    """
    연동 상태 조회

    - unconfigured: 서버에 Fitbit client id/secret 없음
    - disconnected: 소유자 토큰 없음
    - connected: 토큰 있음 (만료 여부와 무관, 전송 전에 갱신)
    """
    if not settings.fitbit_configured:
        return FitbitStatusResponse(state=FitbitConnectionState.UNCONFIGURED)

    token = await get_token(session, owner_id)
    if token is None:
        return FitbitStatusResponse(state=FitbitConnectionState.DISCONNECTED)

    return FitbitStatusResponse(
        state=FitbitConnectionState.CONNECTED,
        fitbit_user_id=token.fitbit_user_id,
        expires_at=token.expires_at,
    )


async def save_tokens(
    session: AsyncSession,
    owner_id: str,
    tokens: FitbitTokens,
) -> FitbitToken:
    """토큰 저장 (소유자당 한 행, 있으면 덮어쓰기)"""
    now = utcnow()
    expires_at = now + timedelta(seconds=tokens.expires_in)

    token = await get_token(session, owner_id)
    if token is None:
        token = FitbitToken(owner_id=owner_id, created_at=now)
        session.add(token)

    token.fitbit_user_id = tokens.user_id
    token.access_token = tokens.access_token
    token.refresh_token = tokens.refresh_token
    token.expires_at = expires_at
    token.updated_at = now

    await session.commit()
    return token


async def connect(
    session: AsyncSession,
    service: FitbitService,
    owner_id: str,
    code: str,
) -> FitbitToken:
    tokens = await service.exchange_code(code)
    token = await save_tokens(session, owner_id, tokens)
    logger.info("Fitbit connected for owner %s (fitbit user %s)", owner_id, tokens.user_id)
    return token


async def disconnect(session: AsyncSession, owner_id: str) -> bool:
    token = await get_token(session, owner_id)
    if token is None:
        return False
    await session.delete(token)
    await session.commit()
    logger.info("Fitbit disconnected for owner %s", owner_id)
    return True


async def ensure_fresh_token(
    session: AsyncSession,
    service: FitbitService,
    owner_id: str,
) -> FitbitToken:
    """
    유효한 access token 확보

    만료됐으면 refresh token으로 갱신하고 새 토큰 쌍을 저장한다.

    Raises:
        FitbitNotConnectedError: 저장된 토큰 없음
        FitbitTokenRefreshError: 갱신 실패 (이번 전송 주기는 중단)
    """
    token = await get_token(session, owner_id)
    if token is None:
        raise FitbitNotConnectedError(f"Fitbit is not connected for owner {owner_id}")

    if not token.is_expired:
        return token

    try:
        tokens = await service.refresh_tokens(token.refresh_token)
    except FitbitError as exc:
        logger.warning("Fitbit token refresh failed for owner %s: %s", owner_id, exc)
        raise FitbitTokenRefreshError(str(exc)) from exc

    return await save_tokens(session, owner_id, tokens)


async def push_food_logs(
    session: AsyncSession,
    service: FitbitService,
    owner_id: str,
    log_ids: Sequence[str],
) -> FitbitPushResponse:
    """
    음식 기록을 요청 순서대로 Fitbit에 전송

    서버에 없는 id, Fitbit 호출이 실패한 id는 failed로 센다.
    """
    ordered: List[str] = list(dict.fromkeys(log_ids))
    if not ordered:
        return FitbitPushResponse()

    token = await ensure_fresh_token(session, service, owner_id)
    logs = {log.id: log for log in await get_food_logs_by_ids(session, owner_id, ordered)}

    pushed: List[str] = []
    failed = 0
    for log_id in ordered:
        log = logs.get(log_id)
        if log is None:
            failed += 1
            logger.warning("Fitbit push skipped, food log %s not on relay", log_id)
            continue
        try:
            await service.log_food(
                token.access_token,
                food_name=log.food_name,
                meal_type_id=meal_type_to_fitbit_id(log.meal_type),
                calories=log.calories,
                day=log.logged_at.date(),
            )
            pushed.append(log_id)
        except FitbitError as exc:
            failed += 1
            logger.warning("Fitbit push failed for food log %s: %s", log_id, exc)

    logger.info("Fitbit push for %s: %d pushed, %d failed", owner_id, len(pushed), failed)
    return FitbitPushResponse(pushed=pushed, failed=failed)
