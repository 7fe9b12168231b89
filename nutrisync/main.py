import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# .env 파일 로드 (최우선!)
load_dotenv()

from nutrisync.api.v1.router import api_router
from nutrisync.api.v1.schemas.health import HealthStatus
from nutrisync.core.config import get_settings
from nutrisync.core.log_config import configure_logging
from nutrisync.db.session import engine

settings = get_settings()
configure_logging(settings.log_level, sql_echo=settings.app_env == "local")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("NutriSync relay starting (env=%s)", settings.app_env)
    yield
    # 커넥션 풀 정리
    await engine.dispose()


app = FastAPI(
    title="NutriSync Relay API",
    description="로컬 저장소 동기화, Fitbit 전송, 바코드/AI 분석 릴레이",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# 모바일 앱 / 개발용 웹 클라이언트
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_prefix = f"{settings.api_prefix}/{settings.api_version}".rstrip("/")
app.include_router(api_router, prefix=api_prefix)


@app.get("/health", response_model=HealthStatus, tags=["health"])
async def root_health() -> HealthStatus:
    return HealthStatus()


@app.get("/healthz", tags=["health"])
async def root_health_check() -> dict[str, str]:
    """Readiness check for the relay container."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nutrisync.main:app",
        host="0.0.0.0" if settings.app_env != "local" else "127.0.0.1",
        port=settings.port,
        reload=settings.app_env == "local",
        reload_dirs=["nutrisync"],
    )
