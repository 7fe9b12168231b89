from nutrisync.local.repositories.food_items import FoodItemCreate, FoodItemRepository
from nutrisync.local.repositories.food_logs import FoodLogCreate, FoodLogRepository, FoodLogUpdate
from nutrisync.local.repositories.goals import DEFAULT_GOALS, DailyGoalUpdate, GoalRepository
from nutrisync.local.repositories.health_metrics import HealthMetricRepository

__all__ = [
    "DEFAULT_GOALS",
    "DailyGoalUpdate",
    "FoodItemCreate",
    "FoodItemRepository",
    "FoodLogCreate",
    "FoodLogRepository",
    "FoodLogUpdate",
    "GoalRepository",
    "HealthMetricRepository",
]
