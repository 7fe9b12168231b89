"""Relay tables: food_logs, health_metrics, fitbit_tokens

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261018_0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")
FOOD_SOURCES = ("label_scan", "barcode", "photo_ai", "restaurant", "manual", "quick_log")
HEALTH_METRIC_TYPES = (
    "steps",
    "sleep_minutes",
    "heart_rate_resting",
    "heart_rate_avg",
    "active_minutes",
    "calories_burned",
    "weight_kg",
    "body_fat_percent",
)


def upgrade() -> None:
    op.create_table(
        "food_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("meal_type", sa.Enum(*MEAL_TYPES, name="meal_type_enum"), nullable=False),
        sa.Column("source", sa.Enum(*FOOD_SOURCES, name="food_source_enum"), nullable=False),
        sa.Column("food_name", sa.String(length=255), nullable=False),
        sa.Column("serving_size", sa.String(length=100), nullable=False),
        sa.Column("servings", sa.Numeric(5, 2), nullable=False),
        sa.Column("calories", sa.Numeric(8, 2), nullable=False),
        sa.Column("protein_g", sa.Numeric(8, 2), nullable=False),
        sa.Column("carbs_g", sa.Numeric(8, 2), nullable=False),
        sa.Column("fat_g", sa.Numeric(8, 2), nullable=False),
        sa.Column("fiber_g", sa.Numeric(8, 2), nullable=True),
        sa.Column("sugar_g", sa.Numeric(8, 2), nullable=True),
        sa.Column("sodium_mg", sa.Numeric(8, 2), nullable=True),
        sa.Column("photo_url", sa.String(length=500), nullable=True),
        sa.Column("ai_confidence", sa.Numeric(5, 4), nullable=True),
        sa.Column("logged_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_food_logs_user_logged", "food_logs", ["user_id", "logged_at"])

    op.create_table(
        "health_metrics",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("metric_type", sa.Enum(*HEALTH_METRIC_TYPES, name="health_metric_type_enum"), nullable=False),
        sa.Column("value", sa.Numeric(10, 2), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_health_metrics_user_type_recorded",
        "health_metrics",
        ["user_id", "metric_type", "recorded_at"],
    )

    op.create_table(
        "fitbit_tokens",
        sa.Column("owner_id", sa.String(length=36), primary_key=True),
        sa.Column("fitbit_user_id", sa.String(length=50), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("fitbit_tokens")
    op.drop_index("ix_health_metrics_user_type_recorded", table_name="health_metrics")
    op.drop_table("health_metrics")
    op.drop_index("ix_food_logs_user_logged", table_name="food_logs")
    op.drop_table("food_logs")
