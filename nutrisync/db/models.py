"""릴레이 서버 데이터베이스 모델 - 클라이언트 로컬 저장소의 복제본"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nutrisync.db.base import Base
from nutrisync.utils.enums import FOOD_SOURCES, HEALTH_METRIC_TYPES, MEAL_TYPES
from nutrisync.utils.time import utcnow


class FoodLog(Base):
    """food_logs 테이블 - 클라이언트가 생성한 id를 그대로 기본키로 사용"""

    __tablename__ = "food_logs"
    __table_args__ = (
        Index("ix_food_logs_user_logged", "user_id", "logged_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    meal_type: Mapped[str] = mapped_column(Enum(*MEAL_TYPES, name="meal_type_enum"), nullable=False)
    source: Mapped[str] = mapped_column(Enum(*FOOD_SOURCES, name="food_source_enum"), nullable=False)
    food_name: Mapped[str] = mapped_column(String(255), nullable=False)
    serving_size: Mapped[str] = mapped_column(String(100), nullable=False)
    servings: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False, default=1)
    calories: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    protein_g: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    carbs_g: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    fat_g: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    fiber_g: Mapped[Optional[float]] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    sugar_g: Mapped[Optional[float]] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    sodium_mg: Mapped[Optional[float]] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    ai_confidence: Mapped[Optional[float]] = mapped_column(Numeric(5, 4, asdecimal=False), nullable=True)
    logged_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<FoodLog(id={self.id}, user_id={self.user_id}, food_name={self.food_name}, meal_type={self.meal_type})>"


class HealthMetric(Base):
    """health_metrics 테이블"""

    __tablename__ = "health_metrics"
    __table_args__ = (
        Index("ix_health_metrics_user_type_recorded", "user_id", "metric_type", "recorded_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    metric_type: Mapped[str] = mapped_column(Enum(*HEALTH_METRIC_TYPES, name="health_metric_type_enum"), nullable=False)
    value: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    source: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<HealthMetric(id={self.id}, metric_type={self.metric_type}, value={self.value})>"


class FitbitToken(Base):
    """fitbit_tokens 테이블 - 소유자당 OAuth 토큰 한 쌍"""

    __tablename__ = "fitbit_tokens"

    owner_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    fitbit_user_id: Mapped[str] = mapped_column(String(50), nullable=False)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    @property
    def is_expired(self) -> bool:
        return utcnow() >= self.expires_at

    def __repr__(self) -> str:
        return f"<FitbitToken(owner_id={self.owner_id}, fitbit_user_id={self.fitbit_user_id}, expires_at={self.expires_at})>"
