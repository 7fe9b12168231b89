from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from nutrisync.core.config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    # SQLite (테스트/로컬) 드라이버는 풀 크기 옵션을 받지 않음
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,  # 연결 사용 전 유효성 검사
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


engine: AsyncEngine = create_async_engine(
    str(settings.database_url),
    echo=settings.app_env == "local",
    **_engine_options(str(settings.database_url)),
)

SessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request scope injections."""
    async with SessionLocal() as session:
        yield session
