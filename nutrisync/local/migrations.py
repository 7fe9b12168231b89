"""로컬 저장소 스키마 마이그레이션

순서가 정해진 버전별 단계를 적용하고, 적용된 버전을 schema_migrations 테이블에 기록한다.
이미 적용된 버전은 건너뛴다. 새 컬럼/인덱스는 새 Migration을 목록 끝에 추가할 것.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from nutrisync.utils.time import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        name="initial_tables",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS food_logs (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                food_name TEXT NOT NULL,
                meal_type TEXT NOT NULL CHECK (meal_type IN ('breakfast', 'lunch', 'dinner', 'snack')),
                source TEXT NOT NULL CHECK (source IN ('label_scan', 'barcode', 'photo_ai', 'restaurant', 'manual', 'quick_log')),
                serving_size TEXT NOT NULL,
                servings REAL NOT NULL DEFAULT 1 CHECK (servings >= 0.25),
                calories REAL NOT NULL CHECK (calories >= 0),
                protein_g REAL NOT NULL CHECK (protein_g >= 0),
                carbs_g REAL NOT NULL CHECK (carbs_g >= 0),
                fat_g REAL NOT NULL CHECK (fat_g >= 0),
                fiber_g REAL CHECK (fiber_g IS NULL OR fiber_g >= 0),
                sugar_g REAL CHECK (sugar_g IS NULL OR sugar_g >= 0),
                sodium_mg REAL CHECK (sodium_mg IS NULL OR sodium_mg >= 0),
                photo_url TEXT,
                ai_confidence REAL CHECK (ai_confidence IS NULL OR (ai_confidence >= 0 AND ai_confidence <= 1)),
                pushed INTEGER NOT NULL DEFAULT 0,
                synced INTEGER NOT NULL DEFAULT 0,
                logged_at TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS food_database (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                barcode TEXT,
                name TEXT NOT NULL,
                brand TEXT,
                calories REAL NOT NULL,
                protein_g REAL NOT NULL,
                carbs_g REAL NOT NULL,
                fat_g REAL NOT NULL,
                fiber_g REAL,
                sugar_g REAL,
                sodium_mg REAL,
                serving_size TEXT NOT NULL DEFAULT '1 serving',
                is_favorite INTEGER NOT NULL DEFAULT 0,
                use_count INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS daily_goals (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                calories REAL NOT NULL,
                protein_g REAL NOT NULL,
                carbs_g REAL NOT NULL,
                fat_g REAL NOT NULL,
                fiber_g REAL,
                sugar_g REAL,
                sodium_mg REAL,
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS health_metrics (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                metric_type TEXT NOT NULL CHECK (metric_type IN (
                    'steps', 'sleep_minutes', 'heart_rate_resting', 'heart_rate_avg',
                    'active_minutes', 'calories_burned', 'weight_kg', 'body_fat_percent'
                )),
                value REAL NOT NULL,
                recorded_at TEXT NOT NULL,
                source TEXT NOT NULL DEFAULT 'health_connect',
                synced INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_food_logs_logged_at ON food_logs(logged_at)",
            "CREATE INDEX IF NOT EXISTS idx_food_logs_meal_type ON food_logs(meal_type)",
            "CREATE INDEX IF NOT EXISTS idx_food_logs_synced ON food_logs(synced)",
            "CREATE INDEX IF NOT EXISTS idx_food_database_barcode ON food_database(barcode)",
            "CREATE INDEX IF NOT EXISTS idx_food_database_use_count ON food_database(use_count DESC)",
            "CREATE INDEX IF NOT EXISTS idx_health_metrics_type_date ON health_metrics(metric_type, recorded_at)",
            "CREATE INDEX IF NOT EXISTS idx_health_metrics_synced ON health_metrics(synced)",
        ),
    ),
    Migration(
        version=2,
        name="daily_goals_one_row_per_owner",
        statements=(
            # 소유자별 최신 행만 남기고 정리 후 유니크 인덱스 생성
            """
            DELETE FROM daily_goals
            WHERE id NOT IN (
                SELECT id FROM daily_goals AS g
                WHERE g.created_at = (
                    SELECT MAX(created_at) FROM daily_goals WHERE user_id = g.user_id
                )
                GROUP BY g.user_id
            )
            """,
            "CREATE UNIQUE INDEX IF NOT EXISTS ux_daily_goals_user_id ON daily_goals(user_id)",
        ),
    ),
    Migration(
        version=3,
        name="food_logs_push_queue_index",
        statements=(
            "CREATE INDEX IF NOT EXISTS idx_food_logs_push_queue ON food_logs(pushed, synced, logged_at)",
        ),
    ),
)


async def applied_versions(engine: AsyncEngine) -> set[int]:
    async with engine.begin() as conn:
        await conn.execute(
            text(
                "CREATE TABLE IF NOT EXISTS schema_migrations ("
                "version INTEGER PRIMARY KEY, name TEXT NOT NULL, applied_at TEXT NOT NULL)"
            )
        )
        result = await conn.execute(text("SELECT version FROM schema_migrations"))
        return {row[0] for row in result}


async def apply_migrations(
    engine: AsyncEngine,
    migrations: Sequence[Migration] = MIGRATIONS,
) -> list[int]:
    """
    미적용 마이그레이션을 버전 순서대로 적용

    Returns:
        이번 호출에서 적용된 버전 목록
    """
    done = await applied_versions(engine)
    applied: list[int] = []

    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue
        # 한 단계의 DDL과 버전 기록은 같은 트랜잭션
        async with engine.begin() as conn:
            for statement in migration.statements:
                await conn.execute(text(statement))
            await conn.execute(
                text("INSERT INTO schema_migrations (version, name, applied_at) VALUES (:v, :n, :t)"),
                {"v": migration.version, "n": migration.name, "t": utcnow().isoformat(sep=" ")},
            )
        logger.info("Applied local schema migration %s (%s)", migration.version, migration.name)
        applied.append(migration.version)

    return applied
