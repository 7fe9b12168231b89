"""API v1 라우터"""
from fastapi import APIRouter

from nutrisync.api.v1.routes import barcode, fitbit, food_logs, health, health_metrics, scan

api_router = APIRouter()

# 상태 확인
api_router.include_router(health.router, prefix="/health", tags=["health"])

# 로컬 저장소 동기화 라우트
api_router.include_router(food_logs.router, prefix="/food-logs", tags=["food-logs"])
api_router.include_router(health_metrics.router, prefix="/health-metrics", tags=["health-metrics"])

# Fitbit 연동 라우트
api_router.include_router(fitbit.router, prefix="/fitbit", tags=["fitbit"])

# 외부 API 릴레이 (바코드, AI 분석)
api_router.include_router(barcode.router, prefix="/barcode", tags=["barcode"])
api_router.include_router(scan.router, prefix="/scan", tags=["scan"])
