"""아웃바운드 동기화 엔진

로컬 dirty 기록을 배치로 릴레이에 올리고, 서버가 확인한 id만 clean 처리한다.
전송 실패는 로그만 남기고 다음 주기에 다시 시도한다 (로컬 상태 변화 없음).

한 엔진의 run_once()가 겹쳐 호출되면 새 주기를 시작하지 않고 진행 중인 주기의 결과를 기다린다.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, Protocol, Sequence, Set, TypeVar

from pydantic import BaseModel, ValidationError

from nutrisync.api.v1.schemas.food import FoodLogSyncItem, SyncBatchResponse
from nutrisync.api.v1.schemas.health_metric import HealthMetricSyncItem
from nutrisync.core.exceptions import RelayError
from nutrisync.local.relay_client import RelayClient
from nutrisync.local.repositories.food_logs import FoodLogRepository
from nutrisync.local.repositories.health_metrics import HealthMetricRepository

logger = logging.getLogger(__name__)

OutcomeT = TypeVar("OutcomeT")


class SyncableRepository(Protocol):
    async def drain_unsynced(self, limit: int = ..., exclude_ids: Iterable[str] = ...) -> List[Any]: ...

    async def mark_synced(self, records: Sequence[Any]) -> int: ...


@dataclass
class SyncOutcome:
    succeeded_ids: List[str] = field(default_factory=list)
    failed_count: int = 0
    marked_count: int = 0


@dataclass
class PushOutcome:
    pushed_ids: List[str] = field(default_factory=list)
    failed_count: int = 0


class _SingleFlight(Generic[OutcomeT]):
    """진행 중인 주기가 있으면 그 결과를 공유"""

    def __init__(self) -> None:
        self._inflight: Optional[asyncio.Future] = None

    @property
    def running(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def wait(self) -> None:
        """진행 중인 주기가 끝날 때까지 대기 (결과, 예외는 무시)"""
        if self.running:
            await asyncio.wait({self._inflight})

    async def run(self, factory: Callable[[], Awaitable[OutcomeT]]) -> OutcomeT:
        if not self.running:
            self._inflight = asyncio.ensure_future(factory())
        # 호출자 취소가 진행 중인 주기를 중단시키지 않도록 shield
        return await asyncio.shield(self._inflight)


class OutboundSyncEngine:
    """
    로컬 → 릴레이 배치 업서트

    Args:
        name: 로그용 이름 (food_logs, health_metrics)
        repository: drain_unsynced/mark_synced 를 제공하는 저장소
        serialize: 로컬 레코드 → 전송 스키마
        send_batch: 배치 전송 코루틴 (RelayError 발생 가능)
        batch_limit: 한 주기에 보낼 최대 건수
    """

    def __init__(
        self,
        name: str,
        repository: SyncableRepository,
        serialize: Callable[[Any], BaseModel],
        send_batch: Callable[[List[BaseModel]], Awaitable[SyncBatchResponse]],
        batch_limit: int = 100,
    ) -> None:
        self.name = name
        self.repository = repository
        self.serialize = serialize
        self.send_batch = send_batch
        self.batch_limit = batch_limit
        self._flight: _SingleFlight[SyncOutcome] = _SingleFlight()

    @property
    def running(self) -> bool:
        return self._flight.running

    async def drain_unsynced(self, limit: Optional[int] = None) -> List[Any]:
        return await self.repository.drain_unsynced(limit or self.batch_limit)

    async def drain_sendable(self) -> tuple[List[Any], int]:
        """
        전송 스키마를 통과하는 dirty 기록을 batch_limit건까지 모은다

        통과하지 못한 기록은 건너뛰고 그 뒤의 기록을 더 읽는다.
        불량 기록이 batch_limit건 이상 쌓여 있어도 뒤의 정상 기록은 전송된다.

        Returns:
            (전송할 기록, 건너뛴 건수)
        """
        records: List[Any] = []
        rejected: Set[str] = set()
        while len(records) < self.batch_limit:
            page = await self.repository.drain_unsynced(
                self.batch_limit - len(records),
                exclude_ids=rejected.union(record.id for record in records),
            )
            if not page:
                break
            for record in page:
                try:
                    self.serialize(record)
                except ValidationError as exc:
                    rejected.add(record.id)
                    logger.warning("[%s] record %s cannot be sent, skipped: %s", self.name, record.id, exc)
                else:
                    records.append(record)
        return records, len(rejected)

    async def sync_batch(self, records: Sequence[Any]) -> SyncOutcome:
        """
        배치 전송

        직렬화에 실패한 레코드는 실패로 세고 나머지만 보낸다.
        전송 자체가 실패하면 배치 전체를 실패로 처리한다.
        """
        items: List[BaseModel] = []
        failed = 0
        for record in records:
            try:
                items.append(self.serialize(record))
            except ValidationError as exc:
                failed += 1
                logger.warning("[%s] record %s rejected before send: %s", self.name, record.id, exc)

        if not items:
            return SyncOutcome(failed_count=failed)

        try:
            response = await self.send_batch(items)
        except RelayError as exc:
            logger.warning("[%s] batch of %d not sent, will retry: %s", self.name, len(records), exc)
            return SyncOutcome(failed_count=len(records))

        sent_ids = {item.id for item in items}
        acked = set(response.synced)
        succeeded = [record.id for record in records if record.id in acked and record.id in sent_ids]
        return SyncOutcome(succeeded_ids=succeeded, failed_count=failed + len(items) - len(succeeded))

    async def run_once(self) -> SyncOutcome:
        return await self._flight.run(self._cycle)

    async def _cycle(self) -> SyncOutcome:
        records, rejected = await self.drain_sendable()
        if not records:
            if rejected:
                logger.warning("[%s] sync cycle: %d unsendable records, nothing sent", self.name, rejected)
            return SyncOutcome(failed_count=rejected)

        outcome = await self.sync_batch(records)
        outcome.failed_count += rejected
        if outcome.succeeded_ids:
            acked = set(outcome.succeeded_ids)
            outcome.marked_count = await self.repository.mark_synced(
                [record for record in records if record.id in acked]
            )

        logger.info(
            "[%s] sync cycle: %d synced, %d failed, %d marked clean",
            self.name,
            len(outcome.succeeded_ids),
            outcome.failed_count,
            outcome.marked_count,
        )
        return outcome


def food_log_sync_engine(
    repository: FoodLogRepository,
    client: RelayClient,
    batch_limit: int = 100,
) -> OutboundSyncEngine:
    return OutboundSyncEngine(
        name="food_logs",
        repository=repository,
        serialize=FoodLogSyncItem.model_validate,
        send_batch=client.sync_food_logs,
        batch_limit=batch_limit,
    )


def health_metric_sync_engine(
    repository: HealthMetricRepository,
    client: RelayClient,
    batch_limit: int = 100,
) -> OutboundSyncEngine:
    return OutboundSyncEngine(
        name="health_metrics",
        repository=repository,
        serialize=HealthMetricSyncItem.model_validate,
        send_batch=client.sync_health_metrics,
        batch_limit=batch_limit,
    )


class FitbitPushEngine:
    """
    서버 동기화가 끝난 음식 기록을 릴레이를 통해 Fitbit으로 전송

    pushed 플래그는 릴레이가 성공으로 돌려준 id에만 설정된다.
    """

    def __init__(
        self,
        repository: FoodLogRepository,
        client: RelayClient,
        batch_limit: int = 50,
    ) -> None:
        self.repository = repository
        self.client = client
        self.batch_limit = batch_limit
        self._flight: _SingleFlight[PushOutcome] = _SingleFlight()

    @property
    def running(self) -> bool:
        return self._flight.running

    async def run_once(self, ids: Optional[Sequence[str]] = None) -> PushOutcome:
        """
        Fitbit 전송 한 주기

        ids 없이 호출하면 진행 중인 주기가 있을 때 그 결과를 공유한다.
        ids를 주면 진행 중인 주기가 끝난 뒤 그 id들만 대상으로 새 주기를 실행한다.
        """
        if ids is not None:
            ids = list(ids)
            while self._flight.running:
                await self._flight.wait()
        return await self._flight.run(lambda: self._cycle(ids))

    async def _cycle(self, ids: Optional[Sequence[str]]) -> PushOutcome:
        records = await self.repository.get_unpushed(ids=ids, limit=self.batch_limit)
        if not records:
            return PushOutcome()

        selected = [record.id for record in records]
        try:
            response = await self.client.push_to_fitbit(selected)
        except RelayError as exc:
            # 502: 토큰 갱신 실패, 409: 미연결 → 다음 주기에 재시도
            logger.warning("Fitbit push of %d logs failed: %s", len(selected), exc)
            return PushOutcome(failed_count=len(selected))

        selected_set = set(selected)
        pushed = [log_id for log_id in response.pushed if log_id in selected_set]
        await self.repository.mark_pushed(pushed)

        outcome = PushOutcome(pushed_ids=pushed, failed_count=len(selected) - len(pushed))
        logger.info("Fitbit push cycle: %d pushed, %d failed", len(pushed), outcome.failed_count)
        return outcome
