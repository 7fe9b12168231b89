"""클라이언트 런타임 - 저장소/엔진/스케줄러 묶음

UI 쪽 코드는 LocalRuntime 하나만 만들어서 저장소와 동기화 엔진을 꺼내 쓴다.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from nutrisync.core.config import Settings, get_settings
from nutrisync.local.barcode import BarcodeLookup
from nutrisync.local.relay_client import RelayClient
from nutrisync.local.repositories import (
    FoodItemRepository,
    FoodLogRepository,
    GoalRepository,
    HealthMetricRepository,
)
from nutrisync.local.scheduler import SyncScheduler
from nutrisync.local.store import LocalStore
from nutrisync.local.sync_engine import (
    FitbitPushEngine,
    food_log_sync_engine,
    health_metric_sync_engine,
)

logger = logging.getLogger(__name__)


class LocalRuntime:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        owner_id = self.settings.owner_id

        self.store = LocalStore(self.settings.local_database_url)
        self.food_logs = FoodLogRepository(self.store, owner_id)
        self.food_items = FoodItemRepository(self.store, owner_id)
        self.goals = GoalRepository(self.store, owner_id)
        self.health_metrics = HealthMetricRepository(self.store, owner_id)

        self.client = RelayClient(
            self.settings.relay_base_url,
            owner_id,
            timeout=self.settings.http_timeout_seconds,
            transport=transport,
        )
        self.barcode = BarcodeLookup(self.food_items, self.client)

        self.food_log_sync = food_log_sync_engine(
            self.food_logs, self.client, batch_limit=self.settings.sync_batch_limit
        )
        self.health_metric_sync = health_metric_sync_engine(
            self.health_metrics, self.client, batch_limit=self.settings.sync_batch_limit
        )
        self.fitbit_push = FitbitPushEngine(
            self.food_logs, self.client, batch_limit=self.settings.fitbit_batch_limit
        )

        self.scheduler = SyncScheduler()
        self.scheduler.add_job("food_logs", self.food_log_sync.run_once, self.settings.sync_interval_seconds)
        self.scheduler.add_job(
            "health_metrics", self.health_metric_sync.run_once, self.settings.sync_interval_seconds
        )
        self.scheduler.add_job(
            "fitbit_push", self.fitbit_push.run_once, self.settings.fitbit_sync_interval_seconds
        )

    async def start(self, schedule: bool = True) -> "LocalRuntime":
        await self.store.open()
        if schedule:
            self.scheduler.start()
        return self

    async def foreground(self) -> dict:
        """앱이 다시 활성화되면 호출 - 모든 동기화 즉시 실행"""
        return await self.scheduler.trigger_all()

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.client.aclose()
        await self.store.close()
        logger.info("Local runtime stopped")

    async def __aenter__(self) -> "LocalRuntime":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
