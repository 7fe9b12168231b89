"""Services package - 비즈니스 로직"""
# noqa: D104

from . import fitbit_service
from . import fitbit_sync_service
from . import food_log_service
from . import health_metric_service
from . import openfoodfacts_service
from . import sync_service

__all__ = [
    "fitbit_service",
    "fitbit_sync_service",
    "food_log_service",
    "health_metric_service",
    "openfoodfacts_service",
    "sync_service",
]
