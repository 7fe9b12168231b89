"""배치 업서트 공통 처리 - 레코드 단위 커밋/롤백"""
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nutrisync.api.v1.schemas.food import SyncBatchResponse
from nutrisync.core.exceptions import RecordOwnershipError

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)


async def upsert_batch(
    session: AsyncSession,
    owner_id: str,
    items: Sequence[ItemT],
    upsert_one: Callable[[AsyncSession, str, ItemT], Awaitable[object]],
    kind: str,
) -> SyncBatchResponse:
    """
    배치를 한 건씩 업서트

    한 건이 실패해도 나머지는 계속 처리한다. 실패한 건은 synced 목록에서 빠지고 failed로 센다.

    Args:
        session: DB 세션
        owner_id: 요청 소유자
        items: 입력 순서대로 처리할 레코드
        upsert_one: 한 건 업서트 함수
        kind: 로그용 레코드 종류

    Returns:
        SyncBatchResponse(synced=[성공 id], failed=실패 건수)
    """
    synced: list[str] = []
    failed = 0

    for item in items:
        try:
            await upsert_one(session, owner_id, item)
            await session.commit()
            synced.append(item.id)
        except (SQLAlchemyError, RecordOwnershipError) as exc:
            await session.rollback()
            failed += 1
            logger.warning("Failed to upsert %s %s: %s", kind, item.id, exc)

    logger.info("%s batch for %s: %d synced, %d failed", kind, owner_id, len(synced), failed)
    return SyncBatchResponse(synced=synced, failed=failed)
