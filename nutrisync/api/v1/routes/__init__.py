"""API v1 routes package"""

from nutrisync.api.v1.routes import barcode, fitbit, food_logs, health, health_metrics, scan

__all__ = [
    "barcode",
    "fitbit",
    "food_logs",
    "health",
    "health_metrics",
    "scan",
]
