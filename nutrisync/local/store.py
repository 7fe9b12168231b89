"""로컬 영속 저장소 (SQLite, aiosqlite)

화면/런타임이 직접 생성해서 소유한다. 처음 open() 할 때 스키마 마이그레이션을 적용한다.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from nutrisync.core.exceptions import LocalStoreError
from nutrisync.local.migrations import apply_migrations

logger = logging.getLogger(__name__)


def _is_memory_url(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


class LocalStore:
    """로컬 SQLite 데이터베이스 핸들"""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._sessionmaker is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise LocalStoreError("Local store is not open")
        return self._engine

    async def open(self) -> "LocalStore":
        """엔진 생성 + 마이그레이션. 여러 번 호출해도 한 번만 초기화된다."""
        async with self._lock:
            if self._sessionmaker is not None:
                return self

            memory = _is_memory_url(self.url)
            options: dict = {}
            if memory:
                # 인메모리 DB는 연결이 닫히면 사라지므로 단일 연결 공유
                options = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
            engine = create_async_engine(self.url, **options)

            @event.listens_for(engine.sync_engine, "connect")
            def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                if not memory:
                    cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()

            try:
                applied = await apply_migrations(engine)
            except SQLAlchemyError as exc:
                await engine.dispose()
                raise LocalStoreError(f"Local store migration failed: {exc}") from exc

            self._engine = engine
            self._sessionmaker = async_sessionmaker(
                bind=engine,
                autoflush=False,
                expire_on_commit=False,
                class_=AsyncSession,
            )
            logger.info("Local store opened (%s), migrations applied: %s", self.url, applied or "none")
            return self

    async def close(self) -> None:
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        세션 컨텍스트

        CHECK/NOT NULL 위반 등 SQLAlchemy 오류는 롤백 후 LocalStoreError로 변환된다.
        """
        if self._sessionmaker is None:
            await self.open()
        assert self._sessionmaker is not None

        async with self._sessionmaker() as session:
            try:
                yield session
            except SQLAlchemyError as exc:
                await session.rollback()
                raise LocalStoreError(str(exc)) from exc

    async def __aenter__(self) -> "LocalStore":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
