"""Database package - relay server models, session, and base classes."""
from nutrisync.db.base import Base
from nutrisync.db.models import FitbitToken, FoodLog, HealthMetric
from nutrisync.db.session import SessionLocal, engine, get_session

__all__ = [
    "Base",
    "FoodLog",
    "HealthMetric",
    "FitbitToken",
    # Session
    "engine",
    "SessionLocal",
    "get_session",
]
