"""릴레이 서버 HTTP 클라이언트 (httpx)

전송 실패/타임아웃/2xx 외 응답은 모두 RelayError로 올린다.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from nutrisync.api.v1.schemas.barcode import BarcodeProduct
from nutrisync.api.v1.schemas.common import ApiResponse
from nutrisync.api.v1.schemas.fitbit import FitbitPushRequest, FitbitPushResponse, FitbitStatusResponse
from nutrisync.api.v1.schemas.food import FoodLogSyncItem, FoodLogSyncRequest, SyncBatchResponse
from nutrisync.api.v1.schemas.health_metric import HealthMetricSyncItem, HealthMetricSyncRequest
from nutrisync.core.exceptions import RelayError

logger = logging.getLogger(__name__)

OWNER_HEADER = "X-Owner-Id"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class RelayClient:
    """nutrisync 릴레이 API 클라이언트"""

    def __init__(
        self,
        base_url: str,
        owner_id: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={OWNER_HEADER: owner_id},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        response_model: Type[ResponseT],
        **kwargs: Any,
    ) -> ResponseT:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise RelayError(f"{method} {path} failed: {exc!r}") from exc

        if response.is_error:
            raise RelayError(
                f"{method} {path} returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RelayError(f"{method} {path} returned an unexpected body: {exc}") from exc

    async def sync_food_logs(self, items: Sequence[FoodLogSyncItem]) -> SyncBatchResponse:
        payload = FoodLogSyncRequest(logs=list(items))
        return await self._request(
            "POST",
            "/food-logs/sync",
            SyncBatchResponse,
            json=payload.model_dump(mode="json"),
        )

    async def sync_health_metrics(self, items: Sequence[HealthMetricSyncItem]) -> SyncBatchResponse:
        payload = HealthMetricSyncRequest(metrics=list(items))
        return await self._request(
            "POST",
            "/health-metrics/sync",
            SyncBatchResponse,
            json=payload.model_dump(mode="json"),
        )

    async def push_to_fitbit(self, log_ids: List[str]) -> FitbitPushResponse:
        payload = FitbitPushRequest(log_ids=log_ids)
        return await self._request("POST", "/fitbit/push", FitbitPushResponse, json=payload.model_dump())

    async def fitbit_status(self) -> FitbitStatusResponse:
        return await self._request("GET", "/fitbit/status", FitbitStatusResponse)

    async def lookup_barcode(self, barcode: str) -> Optional[BarcodeProduct]:
        """제품 조회. 서버가 찾지 못하면 None"""
        body = await self._request("GET", f"/barcode/{barcode}", ApiResponse[BarcodeProduct])
        return body.data

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
