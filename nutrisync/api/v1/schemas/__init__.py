"""API v1 schemas package - 클라이언트와 서버가 공유하는 전송 스키마"""

from nutrisync.api.v1.schemas.barcode import BarcodeProduct
from nutrisync.api.v1.schemas.common import ApiResponse
from nutrisync.api.v1.schemas.fitbit import (
    FitbitAuthorizeResponse,
    FitbitConnectRequest,
    FitbitPushRequest,
    FitbitPushResponse,
    FitbitStatusResponse,
)
from nutrisync.api.v1.schemas.food import (
    DailyNutritionSummary,
    FoodLogRead,
    FoodLogSyncItem,
    FoodLogSyncRequest,
    SyncBatchResponse,
)
from nutrisync.api.v1.schemas.health import HealthStatus
from nutrisync.api.v1.schemas.health_metric import (
    HealthMetricRead,
    HealthMetricSyncItem,
    HealthMetricSyncRequest,
)
from nutrisync.api.v1.schemas.scan import FoodPhotoItem, FoodPhotoResult, LabelScanResult, ScanImageRequest

__all__ = [
    # Common
    "ApiResponse",
    "HealthStatus",
    # Food logs
    "FoodLogSyncItem",
    "FoodLogSyncRequest",
    "FoodLogRead",
    "SyncBatchResponse",
    "DailyNutritionSummary",
    # Health metrics
    "HealthMetricSyncItem",
    "HealthMetricSyncRequest",
    "HealthMetricRead",
    # Fitbit
    "FitbitStatusResponse",
    "FitbitAuthorizeResponse",
    "FitbitConnectRequest",
    "FitbitPushRequest",
    "FitbitPushResponse",
    # Barcode / scan
    "BarcodeProduct",
    "ScanImageRequest",
    "LabelScanResult",
    "FoodPhotoItem",
    "FoodPhotoResult",
]
