"""릴레이 서버 스키마 마이그레이션 (food_logs, health_metrics, fitbit_tokens)

로컬 저장소(SQLite)는 nutrisync.local.migrations 에서 별도로 관리한다.

    alembic upgrade head                       # DATABASE_URL 사용
    alembic -x url=sqlite+aiosqlite:///relay.db upgrade head
"""
from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from nutrisync.core.config import get_settings
from nutrisync.db.base import Base
from nutrisync.db import models  # noqa: F401 - 모델 등록

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def _run_offline(url: str) -> None:
    _configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    # SQLite는 ALTER TABLE 제약이 있어 batch 모드로 생성
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
    with context.begin_transaction():
        context.run_migrations()


async def _run_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


url = _database_url()
if context.is_offline_mode():
    _run_offline(url)
else:
    asyncio.run(_run_online(url))
